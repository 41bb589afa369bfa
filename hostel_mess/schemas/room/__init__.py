from hostel_mess.schemas.room.seat import (
    SeatCreate,
    SeatReconcileReport,
    SeatResponse,
    SeatStatusUpdate,
    SeatTotalUpdate,
)

__all__ = [
    "SeatCreate",
    "SeatStatusUpdate",
    "SeatTotalUpdate",
    "SeatResponse",
    "SeatReconcileReport",
]
