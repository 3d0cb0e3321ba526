"""Credential binder: records a ledger mint against a verified Resume.

The mint itself happens in the subject's wallet before this is called; the
binder only persists the linkage, in one transaction:
    Resume.credential_id
    latest Verification.credential_id / tx_hash (set at most once)
    User.credential_ids (set union)
"""

import logging

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from database import STATUS_VERIFIED, Resume, Verification, commit
from models.responses import CredentialBinding
from services.errors import AlreadyBound, PreconditionFailed
from services.resume_service import ensure_user, get_resume, require_subject
from services.verification_pipeline import check_owner, latest_verification

logger = logging.getLogger(__name__)


def _claim_token(db: Session, model, row_id: str, credential_id: int, **values) -> None:
    """Set model.credential_id unless the row already holds a different token."""
    result = db.execute(
        update(model)
        .where(
            model.id == row_id,
            or_(model.credential_id.is_(None), model.credential_id == credential_id),
        )
        .values(credential_id=credential_id, **values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        raise AlreadyBound(f"{model.__name__} {row_id} is already bound to another credential")


def bind_credential(
    db: Session,
    resume_id: str,
    wallet_address: str,
    credential_id: int,
    tx_hash: str | None = None,
) -> CredentialBinding:
    """Link a minted token to a verified Resume.

    Binding the same token again is a no-op; binding a different token to an
    already bound Resume raises AlreadyBound.
    """
    resume = get_resume(db, resume_id)
    subject = check_owner(resume, wallet_address)

    if resume.verification_status != STATUS_VERIFIED:
        raise PreconditionFailed(
            f"Resume {resume_id} is {resume.verification_status}, only verified resumes can be credentialed"
        )
    if resume.credential_id is not None and resume.credential_id != credential_id:
        raise AlreadyBound(f"Resume {resume_id} is already bound to credential {resume.credential_id}")

    verification = latest_verification(db, resume.id)
    if verification is None:
        raise PreconditionFailed(f"Resume {resume_id} has no verification record")
    if verification.credential_id is not None and verification.credential_id != credential_id:
        raise AlreadyBound(
            f"Verification {verification.id} is already bound to credential {verification.credential_id}"
        )

    _claim_token(db, Resume, resume.id, credential_id)
    _claim_token(
        db, Verification, verification.id, credential_id,
        tx_hash=func.coalesce(Verification.tx_hash, tx_hash),
    )

    user = ensure_user(db, subject)
    if credential_id not in (user.credential_ids or []):
        # reassign so the JSON column is flagged dirty
        user.credential_ids = [*(user.credential_ids or []), credential_id]

    commit(db)
    logger.info("Bound credential %d to resume %s (tx=%s)", credential_id, resume.id, tx_hash)

    return CredentialBinding(
        resume_id=resume.id,
        credential_id=credential_id,
        tx_hash=verification.tx_hash,
    )


def list_credentials(db: Session, wallet_address: str) -> list[Resume]:
    """Resumes of the subject that carry a bound credential."""
    subject = require_subject(wallet_address)
    stmt = (
        select(Resume)
        .where(Resume.wallet_address == subject, Resume.credential_id.is_not(None))
        .order_by(Resume.created_at.desc())
    )
    return list(db.scalars(stmt))
