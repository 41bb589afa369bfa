from hostel_mess.schemas.hostel.hostel import (
    FineCreate,
    FineResponse,
    HostelCreate,
    HostelResponse,
    HostelRuleCreate,
    HostelRuleResponse,
    LocationSchema,
    MealWeightsUpdate,
    SeatSummary,
    SuspensionRequest,
)
from hostel_mess.schemas.hostel.membership import (
    JoinHostelRequest,
    LeaveHostelRequest,
    MembershipResponse,
    SecurityDepositRequest,
)

__all__ = [
    "LocationSchema",
    "HostelCreate",
    "HostelResponse",
    "SeatSummary",
    "HostelRuleCreate",
    "HostelRuleResponse",
    "MealWeightsUpdate",
    "SuspensionRequest",
    "FineCreate",
    "FineResponse",
    "JoinHostelRequest",
    "LeaveHostelRequest",
    "SecurityDepositRequest",
    "MembershipResponse",
]
