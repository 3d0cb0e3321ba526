"""AI-assist calls that sit beside the issuance flow: skill match and career advice."""

import logging

from sqlalchemy.orm import Session

from models.responses import CareerAdviceResponse, SkillMatchResponse
from services.errors import BadInput
from services.resume_service import get_resume
from services.scoring_oracle import ScoringOracle
from services.verification_pipeline import build_claims, check_owner

logger = logging.getLogger(__name__)


async def match_skills(
    skills: list[str],
    job_description: str,
    oracle: ScoringOracle,
) -> SkillMatchResponse:
    cleaned = [s.strip() for s in skills if s and s.strip()]
    if not cleaned:
        raise BadInput("At least one skill is required")
    if not job_description.strip():
        raise BadInput("Job description required")

    result = await oracle.match_skills(cleaned, job_description)
    return SkillMatchResponse(**result.model_dump())


async def career_advice(
    db: Session,
    resume_id: str,
    wallet_address: str,
    oracle: ScoringOracle,
) -> CareerAdviceResponse:
    resume = get_resume(db, resume_id)
    check_owner(resume, wallet_address)

    advice = await oracle.career_advice(build_claims(resume))
    logger.info("Generated career advice for resume %s", resume.id)
    return CareerAdviceResponse(advice=advice)
