from hostel_mess.repositories.room.seat_repository import SeatRepository

__all__ = ["SeatRepository"]
