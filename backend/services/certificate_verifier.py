"""Public certificate lookup by verification code.

Read-only and unauthenticated: the code itself is the proof.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from config import settings
from database import Certificate, SkillTest
from models.responses import CertificateOut, CertificateResolution, CertificateTestSummary
from services.errors import BadInput, NotFound

logger = logging.getLogger(__name__)


def resolve_certificate(db: Session, code: str) -> CertificateResolution:
    normalized = (code or "").strip().upper()
    if not normalized:
        raise BadInput("Verification code required")

    stmt = select(Certificate).where(Certificate.verification_code == normalized)
    certificate = db.scalars(stmt).first()
    if certificate is None:
        logger.info("Unknown verification code %s", normalized)
        raise NotFound("Certificate not found")

    test = db.get(SkillTest, certificate.test_id)
    if test is not None:
        total = len(test.questions)
        correct = sum(
            1 for q, a in zip(test.questions, test.answers or []) if a == q["correct_answer"]
        )
        completed_at = test.completed_at
    else:
        total = settings.question_count
        correct = round(certificate.score / 100 * total)
        completed_at = None

    return CertificateResolution(
        certificate=CertificateOut(
            wallet_address=certificate.wallet_address,
            skill=certificate.skill,
            score=certificate.score,
            verification_code=certificate.verification_code,
            ipfs_hash=certificate.ipfs_hash,
            issued_at=certificate.created_at,
            credential_id=certificate.credential_id,
        ),
        test=CertificateTestSummary(
            total_questions=total,
            correct_answers=correct,
            completed_at=completed_at,
        ),
    )
