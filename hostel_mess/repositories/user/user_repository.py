"""
User repository.
"""

from sqlalchemy.orm import Session

from hostel_mess.core.exceptions import UserNotFoundError
from hostel_mess.models.user import User
from hostel_mess.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):

    def __init__(self, db: Session):
        super().__init__(User, db)

    def _not_found(self, id: str) -> UserNotFoundError:
        return UserNotFoundError(id)
