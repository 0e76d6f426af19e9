"""Create all tables. Run on app startup.

On an empty database a bootstrap admin is created with a random password
(never a hardcoded one). It is logged once; change it after first login.
"""
import logging
import secrets

from sqlalchemy.orm import Session

from voicepos.core.config import settings
from voicepos.core.security import get_password_hash
from voicepos.db.base import Base
from voicepos.db.session import SessionLocal, engine
from voicepos.models import user, product, sale, invoice_counter  # noqa: F401 - register models
from voicepos.models.user import ROLE_ADMIN, User
from voicepos.services.invoice_service import ensure_invoice_counter

logger = logging.getLogger(__name__)


def create_default_admin(db: Session):
    if db.query(User).count() > 0:
        return None

    default_password = secrets.token_urlsafe(16)
    admin = User(
        email=settings.DEFAULT_ADMIN_EMAIL,
        hashed_password=get_password_hash(default_password),
        name="Administrator",
        role=ROLE_ADMIN,
    )
    db.add(admin)
    db.commit()

    logger.warning(
        "Default admin user created. Email: %s Password: %s "
        "(change this password immediately after first login)",
        admin.email,
        default_password,
    )
    return admin


def init_db():
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        ensure_invoice_counter(db)
        db.commit()
        create_default_admin(db)
    finally:
        db.close()
