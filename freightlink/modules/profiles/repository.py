# freightlink/modules/profiles/repository.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import Dict, Any, Optional

from freightlink.shared.database.models import User


class ProfileRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int, role: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id, User.role == role).first()

    def email_taken(self, email: str, user_id: int) -> bool:
        return self.db.query(User).filter(User.email == email, User.id != user_id).first() is not None

    def update_user(self, user: User, updates: Dict[str, Any]) -> User:
        for field, value in updates.items():
            setattr(user, field, value)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        self.db.refresh(user)
        return user
