from hostel_mess.models.user.user import User

__all__ = ["User"]
