from hostel_mess.services.hostel.hostel_service import HostelService
from hostel_mess.services.hostel.membership_service import MembershipService

__all__ = ["HostelService", "MembershipService"]
