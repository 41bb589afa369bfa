from hostel_mess.models.hostel.hostel import Hostel
from hostel_mess.models.hostel.hostel_rule import HostelRule
from hostel_mess.models.hostel.membership import HostelMembership
from hostel_mess.models.hostel.fine import Fine

__all__ = ["Hostel", "HostelRule", "HostelMembership", "Fine"]
