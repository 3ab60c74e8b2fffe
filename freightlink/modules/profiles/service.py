# freightlink/modules/profiles/service.py
from fastapi import HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
import logging

from freightlink.shared.database.models import User
from .repository import ProfileRepository

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = ProfileRepository(db)

    async def get_profile(self, user_id: int, role: str) -> User:
        user = self.repository.get_user(user_id, role)
        if not user:
            raise HTTPException(status_code=404, detail=f"{role.capitalize()} not found")
        return user

    async def update_profile(self, user_id: int, role: str, updates: BaseModel) -> User:
        """Partial update; only fields present in the body are written"""
        user = await self.get_profile(user_id, role)
        changes = updates.model_dump(exclude_unset=True)

        if changes.get("email") and self.repository.email_taken(changes["email"], user_id):
            raise HTTPException(status_code=409, detail="Email already in use")

        try:
            user = self.repository.update_user(user, changes)
        except SQLAlchemyError as e:
            logger.exception(f"❌ Error updating {role} profile {user_id}")
            raise HTTPException(status_code=500, detail=f"Error updating profile: {str(e)}")

        logger.info(f"📝 {role} {user_id} updated profile fields: {sorted(changes)}")
        return user
