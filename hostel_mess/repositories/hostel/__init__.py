from hostel_mess.repositories.hostel.hostel_repository import HostelRepository
from hostel_mess.repositories.hostel.hostel_rule_repository import HostelRuleRepository
from hostel_mess.repositories.hostel.membership_repository import MembershipRepository
from hostel_mess.repositories.hostel.fine_repository import FineRepository

__all__ = [
    "HostelRepository",
    "HostelRuleRepository",
    "MembershipRepository",
    "FineRepository",
]
