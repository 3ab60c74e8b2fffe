from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import List

from freightlink.config.database import get_db
from freightlink.shared.database.models import User
from freightlink.core.auth.service import AuthService

security = HTTPBearer()

class AuthenticationError(HTTPException):
    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

class AuthorizationError(HTTPException):
    def __init__(self, detail: str = "Not enough permissions"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail
        )

def get_auth_service(request: Request) -> AuthService:
    """AuthService built at startup from the app's Settings"""
    return request.app.state.auth_service

async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    auth_service: AuthService = Depends(get_auth_service),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the caller from the bearer token"""

    payload = auth_service.verify_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError("Invalid or expired token")

    user_id = payload.get("user_id")
    if user_id is None:
        raise AuthenticationError("Invalid token payload")

    user = db.query(User).filter(User.id == user_id).first()

    if user is None:
        raise AuthenticationError("User not found")

    if not user.is_active:
        raise AuthenticationError("Inactive user")

    return user

def require_roles(allowed_roles: List[str]):
    """Factory for a dependency that requires one of the given roles"""
    def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed_roles:
            raise AuthorizationError(
                f"Role '{current_user.role}' not allowed. Allowed roles: {allowed_roles}"
            )
        return current_user
    return role_checker

# Role-specific dependencies
def get_driver_user(current_user: User = Depends(require_roles(["driver"]))):
    """Dependency for drivers"""
    return current_user

def get_business_user(current_user: User = Depends(require_roles(["business"]))):
    """Dependency for businesses"""
    return current_user
