from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import or_
from sqlalchemy.orm import Session
import logging

from freightlink.config.database import get_db
from freightlink.core.auth.service import AuthService
from freightlink.core.auth.schemas import UserLogin, UserRegister, TokenResponse, UserResponse
from freightlink.core.auth.dependencies import get_current_user, get_auth_service
from freightlink.shared.database.models import User

logger = logging.getLogger(__name__)

router = APIRouter()


def _authenticate(db: Session, auth_service: AuthService, username: str, password: str) -> TokenResponse:
    user = db.query(User).filter(
        or_(User.username == username, User.email == username)
    ).first()

    if not user or not auth_service.verify_password(password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user"
        )

    access_token = auth_service.create_access_token(
        data={"user_id": user.id, "role": user.role}
    )

    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user=UserResponse.model_validate(user)
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: UserRegister,
    auth_service: AuthService = Depends(get_auth_service),
    db: Session = Depends(get_db)
):
    """
    Register a driver or business account

    Username and email must both be unused.
    """
    existing = db.query(User).filter(
        or_(User.username == payload.username, User.email == payload.email)
    ).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username or email already exists"
        )

    data = payload.model_dump(exclude={"password"})
    user = User(**data, password_hash=auth_service.get_password_hash(payload.password))
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"👤 Registered {user.role} account {user.username} (id={user.id})")
    return user


@router.post("/login", response_model=TokenResponse)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    auth_service: AuthService = Depends(get_auth_service),
    db: Session = Depends(get_db)
):
    """
    OAuth2 form login

    **Parameters:**
    - **username**: username or email
    - **password**: password
    """
    return _authenticate(db, auth_service, form_data.username, form_data.password)


@router.post("/login-json", response_model=TokenResponse)
async def login_json(
    user_login: UserLogin,
    auth_service: AuthService = Depends(get_auth_service),
    db: Session = Depends(get_db)
):
    """JSON login, same semantics as /login"""
    return _authenticate(db, auth_service, user_login.username, user_login.password)


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Current account, resolved from the bearer token"""
    return current_user
