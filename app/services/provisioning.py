import logging

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import hash_password
from app.models.user import Profile, UserRole
from app.services.audit import log_audit

logger = logging.getLogger(__name__)


def ensure_founder(db: Session) -> Profile | None:
    """Create the founder account from settings when the store has none yet."""
    if not settings.founder_username or not settings.founder_password:
        return None
    if db.scalar(select(Profile.id).where(Profile.role == UserRole.FOUNDER)):
        return None

    email = settings.founder_email or f"{settings.founder_username}@localhost"
    clash = db.scalar(
        select(Profile).where(or_(Profile.username == settings.founder_username, Profile.email == email))
    )
    if clash:
        logger.warning("Founder bootstrap skipped: username or email %s already taken", settings.founder_username)
        return None

    founder = Profile(
        username=settings.founder_username,
        email=email,
        full_name=f"{settings.founder_username} (Founder)",
        password_hash=hash_password(settings.founder_password),
        role=UserRole.FOUNDER,
    )
    db.add(founder)
    db.flush()
    log_audit(db, "users.founder_bootstrapped", founder.id, entity_type="profile", entity_id=founder.id)
    db.commit()
    logger.info("Founder account %s created", founder.username)
    return founder
