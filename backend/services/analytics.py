"""Per-subject dashboard summary built from the record store."""

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from database import STATUS_VERIFIED, Certificate, Resume, User, Verification
from models.responses import ActivityEntry, AnalyticsResponse
from services.resume_service import require_subject

RECENT_ACTIVITY_LIMIT = 5
STRENGTH_STEP = 20


def _profile_strength(user: User | None, resumes: list[Resume], verification_count: int) -> int:
    checks = [
        bool(user and user.name),
        bool(user and user.email),
        len(resumes) > 0,
        verification_count > 0,
        any(r.verification_status == STATUS_VERIFIED for r in resumes),
    ]
    return STRENGTH_STEP * sum(checks)


def subject_analytics(db: Session, wallet_address: str) -> AnalyticsResponse:
    subject = require_subject(wallet_address)

    resumes = list(db.scalars(select(Resume).where(Resume.wallet_address == subject)))
    verifications = list(
        db.scalars(select(Verification).where(Verification.wallet_address == subject))
    )
    certificate_count = db.scalar(
        select(func.count()).select_from(Certificate).where(Certificate.wallet_address == subject)
    )
    user = db.get(User, subject)

    avg_score = (
        sum(v.score for v in verifications) / len(verifications) if verifications else 0
    )

    activity = [
        ActivityEntry(title=f"Resume uploaded: {r.name}", timestamp=r.created_at)
        for r in resumes
    ] + [
        ActivityEntry(title=f"Verification completed ({v.score}%)", timestamp=v.created_at)
        for v in verifications
    ]
    activity.sort(key=lambda a: a.timestamp, reverse=True)

    return AnalyticsResponse(
        resume_count=len(resumes),
        verification_count=len(verifications),
        verification_score=round(avg_score),
        credential_count=sum(1 for r in resumes if r.verification_status == STATUS_VERIFIED),
        certificate_count=certificate_count or 0,
        profile_strength=_profile_strength(user, resumes, len(verifications)),
        recent_activity=activity[:RECENT_ACTIVITY_LIMIT],
    )
