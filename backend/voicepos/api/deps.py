"""FastAPI dependencies: DB session, current user from the bearer JWT, admin gate."""
from typing import Generator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from voicepos.core.audit import AuditLog
from voicepos.core.exceptions import BusinessError
from voicepos.core.security import decode_access_token
from voicepos.db.session import SessionLocal
from voicepos.models.user import User

security = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> int:
    """Extract user ID from the Authorization: Bearer token."""
    if not credentials:
        raise BusinessError.unauthorized("missing bearer token")

    sub = decode_access_token(credentials.credentials)
    if not sub:
        raise BusinessError.unauthorized("invalid or expired token")

    try:
        return int(sub)
    except ValueError:
        raise BusinessError.unauthorized(f"non-numeric subject {sub!r}")


def get_current_user(
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
) -> User:
    """Load current user from DB."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise BusinessError.unauthorized(f"token for unknown user {user_id}")
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Catalog mutations are limited to admin accounts."""
    if not current_user.is_admin:
        AuditLog.log_access_denied("write", "product", current_user.id, "Admin role required")
        raise BusinessError.forbidden(f"user {current_user.id} is not an admin")
    return current_user
