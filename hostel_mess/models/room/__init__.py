from hostel_mess.models.room.seat import Seat

__all__ = ["Seat"]
