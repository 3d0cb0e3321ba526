"""Verification pipeline: drives a Resume through credibility assessment.

Flow:
    resume_id + requesting wallet
      ├─ load Resume, check ownership        → NotFound / Authorization
      ├─ ResumeClaims (assessable subset)
      ├─ oracle.assess_resume(claims)        → ResumeAssessment (strict)
      ├─ blob_store.put(report payload)      → content address
      └─ one transaction:
            insert Verification
            update Resume derived fields (status, score, report, ipfs_hash)

Concurrent runs on the same Resume are not serialized: both Verification rows
persist and the last commit wins on the Resume's derived fields.
"""

import json
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from config import PASS_THRESHOLD
from database import (
    STATUS_REJECTED,
    STATUS_VERIFIED,
    Resume,
    Verification,
    commit,
    normalize_subject,
    utcnow,
)
from models.schemas.resume_data import ResumeClaims
from services.blob_store import BlobStore
from services.errors import AuthorizationError, NotFound
from services.resume_service import get_resume
from services.scoring_oracle import ScoringOracle

logger = logging.getLogger(__name__)


def status_for_score(score: int) -> str:
    return STATUS_VERIFIED if score >= PASS_THRESHOLD else STATUS_REJECTED


def build_claims(resume: Resume) -> ResumeClaims:
    """Assemble the part of a Resume the oracle is allowed to see."""
    return ResumeClaims(
        name=resume.name,
        email=resume.email or "",
        summary=resume.summary or "",
        skills=resume.skills or [],
        education=resume.education or [],
        experience=resume.experience or [],
        certifications=resume.certifications or [],
        projects=resume.projects or [],
        github_url=resume.github_url,
        linkedin_url=resume.linkedin_url,
    )


def check_owner(resume: Resume, wallet_address: str) -> str:
    subject = normalize_subject(wallet_address or "")
    if resume.wallet_address != subject:
        logger.warning(
            "Wallet mismatch on resume %s: owner=%s requester=%s",
            resume.id, resume.wallet_address, subject,
        )
        raise AuthorizationError("Resume belongs to a different wallet")
    return subject


async def run_verification(
    db: Session,
    resume_id: str,
    wallet_address: str,
    oracle: ScoringOracle,
    blob_store: BlobStore,
) -> Verification:
    """Assess a Resume and record the result.

    Returns the new Verification. Nothing is written if the oracle, the blob
    store or the commit fails.
    """
    resume = get_resume(db, resume_id)
    subject = check_owner(resume, wallet_address)

    claims = build_claims(resume)
    logger.info("Assessing resume %s (%d skills)", resume.id, len(claims.skills))
    assessment = await oracle.assess_resume(claims)

    report = assessment.model_dump(by_alias=True)
    timestamp = utcnow()
    ipfs_hash = await blob_store.put({
        "resumeId": resume.id,
        "walletAddress": subject,
        "verificationResult": report,
        "timestamp": timestamp.isoformat() + "Z",
    })

    verification = Verification(
        resume_id=resume.id,
        wallet_address=subject,
        score=assessment.score,
        ai_report=json.dumps(report),
        skills_verified=[s.model_dump() for s in assessment.skills_analysis],
        education_verified=[e.model_dump() for e in assessment.education_analysis],
        experience_verified=[e.model_dump() for e in assessment.experience_analysis],
        overall_assessment=assessment.overall_assessment,
        red_flags=list(assessment.red_flags),
        strengths=list(assessment.strengths),
        ipfs_hash=ipfs_hash,
        created_at=timestamp,
    )
    db.add(verification)

    resume.verification_status = status_for_score(assessment.score)
    resume.verification_score = assessment.score
    resume.verification_report = verification.ai_report
    resume.ipfs_hash = ipfs_hash

    commit(db)
    db.refresh(verification)

    logger.info(
        "Resume %s scored %d -> %s (pinned %s)",
        resume.id, assessment.score, resume.verification_status, ipfs_hash,
    )
    return verification


def latest_verification(db: Session, resume_id: str) -> Verification | None:
    stmt = (
        select(Verification)
        .where(Verification.resume_id == resume_id)
        .order_by(Verification.created_at.desc())
        .limit(1)
    )
    return db.scalars(stmt).first()


def get_latest_verification(db: Session, resume_id: str) -> Verification:
    """Most recent Verification of a Resume (read-only)."""
    verification = latest_verification(db, resume_id)
    if verification is None:
        raise NotFound(f"No verification found for resume {resume_id}")
    return verification
