"""Auth: register, login, current user.

Tokens travel in the Authorization header only. Every failed login gets
the same generic 401 so accounts cannot be enumerated.
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from voicepos.api.deps import get_current_user, get_db
from voicepos.core.audit import AuditLog
from voicepos.core.config import settings
from voicepos.core.exceptions import BusinessError
from voicepos.core.security import create_access_token, get_password_hash, verify_password
from voicepos.models.user import ROLE_ADMIN, User
from voicepos.schemas.user import Token, UserCreate, UserLogin, UserResponse

router = APIRouter()


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(data: UserCreate, request: Request, db: Session = Depends(get_db)):
    """
    Register a shop operator. Self-registered accounts own their catalog
    and get the admin role.

    Password requirements:
    - At least MIN_PASSWORD_LENGTH characters
    - At least one number (when REQUIRE_NUMBERS)
    """
    email = data.email.lower()
    if db.query(User).filter(User.email == email).first():
        AuditLog.log_authentication("register", email, _client_ip(request), False, reason="Email already registered")
        raise BusinessError.conflict("Email already registered")

    if len(data.password) < settings.MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters",
        )

    if settings.REQUIRE_NUMBERS and not any(c.isdigit() for c in data.password):
        raise HTTPException(
            status_code=400,
            detail="Password must contain at least one number",
        )

    user = User(
        email=email,
        hashed_password=get_password_hash(data.password),
        name=data.name,
        role=ROLE_ADMIN,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    AuditLog.log_authentication("register", email, _client_ip(request), True)
    return user


@router.post("/login", response_model=Token)
def login(data: UserLogin, request: Request, db: Session = Depends(get_db)):
    email = data.email.lower()
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(data.password, user.hashed_password):
        AuditLog.log_authentication("failed_login", email, _client_ip(request), False, reason="Invalid credentials")
        raise BusinessError.unauthorized(f"failed login for {email}")

    AuditLog.log_authentication("login", email, _client_ip(request), True)
    return Token(access_token=create_access_token(subject=str(user.id)))


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user."""
    return current_user
