"""Resume submission and subject profiles."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from database import Resume, User, commit, normalize_subject
from models.requests import ProfileUpdate, ResumeSubmission
from services.errors import BadInput, NotFound

logger = logging.getLogger(__name__)


def require_subject(wallet_address: str) -> str:
    subject = normalize_subject(wallet_address or "")
    if not subject:
        raise BadInput("Wallet address required")
    return subject


def ensure_user(db: Session, subject: str) -> User:
    """Return the subject's User, creating it (unflushed) on first use."""
    user = db.get(User, subject)
    if user is None:
        user = User(wallet_address=subject, credential_ids=[])
        db.add(user)
        logger.info("Created user %s", subject)
    return user


def submit_resume(db: Session, submission: ResumeSubmission) -> Resume:
    """Create a pending Resume for the subject."""
    subject = require_subject(submission.wallet_address)
    fields = submission.model_dump(exclude={"wallet_address"})

    ensure_user(db, subject)
    resume = Resume(wallet_address=subject, **fields)
    db.add(resume)
    commit(db)
    db.refresh(resume)

    logger.info("Resume %s submitted by %s (%d skills)", resume.id, subject, len(resume.skills))
    return resume


def get_resume(db: Session, resume_id: str) -> Resume:
    resume = db.get(Resume, resume_id)
    if resume is None:
        raise NotFound(f"Resume {resume_id} not found")
    return resume


def list_resumes(db: Session, wallet_address: str) -> list[Resume]:
    subject = require_subject(wallet_address)
    stmt = (
        select(Resume)
        .where(Resume.wallet_address == subject)
        .order_by(Resume.created_at.desc())
    )
    return list(db.scalars(stmt))


def get_profile(db: Session, wallet_address: str) -> User | None:
    return db.get(User, require_subject(wallet_address))


def upsert_profile(db: Session, update: ProfileUpdate) -> User:
    """Write the supplied profile fields. Credential ids are not editable here."""
    subject = require_subject(update.wallet_address)
    user = ensure_user(db, subject)

    changes = update.model_dump(exclude={"wallet_address"}, exclude_none=True)
    for field, value in changes.items():
        setattr(user, field, value)

    commit(db)
    db.refresh(user)
    return user
