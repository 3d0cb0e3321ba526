from fastapi import APIRouter, Depends, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.orm import Session

from api.dependencies import get_blob_store, get_db, get_oracle
from config import settings
from models.requests import (
    CareerAdviceRequest,
    CredentialBindRequest,
    ProfileUpdate,
    ResumeSubmission,
    SkillMatchRequest,
    SkillTestStartRequest,
    SkillTestSubmitRequest,
    VerifyRequest,
)
from models.responses import (
    AnalyticsResponse,
    CareerAdviceResponse,
    CertificateResolution,
    CredentialBinding,
    ProfileOut,
    ResumeOut,
    SkillMatchResponse,
    SkillTestOut,
    SkillTestResult,
    SkillTestStarted,
    VerificationOut,
    VerificationStarted,
)
from services import (
    ai_assist,
    analytics,
    certificate_verifier,
    credential_binder,
    resume_service,
    skill_test_engine,
    verification_pipeline,
)
from services.blob_store import BlobStore
from services.scoring_oracle import ScoringOracle

SUBJECT_HEADER = "x-wallet-address"


async def remember_subject(request: Request) -> None:
    """Expose the JSON body's wallet address to the rate-limit key function.

    Dependencies resolve before the limiter checks the request, and Starlette
    caches the body, so the endpoint still sees it.
    """
    try:
        payload = await request.json()
    except ValueError:
        return
    if isinstance(payload, dict) and isinstance(payload.get("wallet_address"), str):
        request.state.subject = payload["wallet_address"]


def subject_or_remote_address(request: Request) -> str:
    """Rate-limit key: the caller's wallet when known, else the client address."""
    subject = (
        getattr(request.state, "subject", None)
        or request.headers.get(SUBJECT_HEADER)
        or request.query_params.get("wallet_address")
    )
    if subject:
        return subject.strip().lower()
    return get_remote_address(request)


router = APIRouter()
limiter = Limiter(
    key_func=subject_or_remote_address,
    enabled=settings.rate_limit_enabled,
    storage_uri=settings.rate_limit_storage_uri,
)


@router.get("/health")
async def health():
    return {
        "status": "ok",
        "gemini_configured": bool(settings.gemini_api_key),
        "pinata_configured": bool(settings.pinata_api_key and settings.pinata_secret_key),
    }


# --- Resumes -------------------------------------------------------------

@router.post("/resume", response_model=ResumeOut)
def submit_resume(body: ResumeSubmission, db: Session = Depends(get_db)):
    return resume_service.submit_resume(db, body)


@router.get("/resume", response_model=list[ResumeOut])
def list_resumes(wallet_address: str = Query(...), db: Session = Depends(get_db)):
    return resume_service.list_resumes(db, wallet_address)


@router.get("/resume/{resume_id}", response_model=ResumeOut)
def get_resume(resume_id: str, db: Session = Depends(get_db)):
    return resume_service.get_resume(db, resume_id)


# --- Verification ----------------------------------------------------------

@router.post("/verify", response_model=VerificationStarted, dependencies=[Depends(remember_subject)])
@limiter.limit(settings.rate_limit_verification)
async def start_verification(
    request: Request,
    body: VerifyRequest,
    db: Session = Depends(get_db),
    oracle: ScoringOracle = Depends(get_oracle),
    blob_store: BlobStore = Depends(get_blob_store),
):
    verification = await verification_pipeline.run_verification(
        db, body.resume_id, body.wallet_address, oracle, blob_store
    )
    return VerificationStarted(
        verification=VerificationOut.model_validate(verification),
        score=verification.score,
        status=verification_pipeline.status_for_score(verification.score),
        ipfs_hash=verification.ipfs_hash,
    )


@router.get("/verify", response_model=VerificationOut)
def latest_verification(resume_id: str = Query(...), db: Session = Depends(get_db)):
    return verification_pipeline.get_latest_verification(db, resume_id)


# --- Credentials -------------------------------------------------------------

@router.post("/credential", response_model=CredentialBinding)
def bind_credential(body: CredentialBindRequest, db: Session = Depends(get_db)):
    return credential_binder.bind_credential(
        db, body.resume_id, body.wallet_address, body.credential_id, body.tx_hash
    )


@router.get("/credential", response_model=list[ResumeOut])
def list_credentials(wallet_address: str = Query(...), db: Session = Depends(get_db)):
    return credential_binder.list_credentials(db, wallet_address)


# --- Skill tests -------------------------------------------------------------

@router.post("/test/start", response_model=SkillTestStarted, dependencies=[Depends(remember_subject)])
@limiter.limit(settings.rate_limit_ai)
async def start_test(
    request: Request,
    body: SkillTestStartRequest,
    db: Session = Depends(get_db),
    oracle: ScoringOracle = Depends(get_oracle),
):
    return await skill_test_engine.start_test(db, body.wallet_address, body.skill, oracle)


@router.post("/test/submit", response_model=SkillTestResult)
async def submit_test(
    body: SkillTestSubmitRequest,
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
):
    return await skill_test_engine.submit_test(
        db, body.test_id, body.wallet_address, body.answers, blob_store
    )


@router.get("/test", response_model=list[SkillTestOut])
def list_tests(wallet_address: str = Query(...), db: Session = Depends(get_db)):
    return skill_test_engine.list_tests(db, wallet_address)


@router.get("/test/{test_id}", response_model=SkillTestOut)
def get_test(test_id: str, wallet_address: str = Query(...), db: Session = Depends(get_db)):
    return skill_test_engine.get_test(db, test_id, wallet_address)


@router.get("/certificate/verify", response_model=CertificateResolution)
def verify_certificate(code: str = Query(..., max_length=64), db: Session = Depends(get_db)):
    return certificate_verifier.resolve_certificate(db, code)


# --- Profile & analytics ---------------------------------------------------------

@router.get("/profile", response_model=ProfileOut | None)
def get_profile(wallet_address: str = Query(...), db: Session = Depends(get_db)):
    return resume_service.get_profile(db, wallet_address)


@router.post("/profile", response_model=ProfileOut)
def save_profile(body: ProfileUpdate, db: Session = Depends(get_db)):
    return resume_service.upsert_profile(db, body)


@router.get("/analytics", response_model=AnalyticsResponse)
def subject_analytics(wallet_address: str = Query(...), db: Session = Depends(get_db)):
    return analytics.subject_analytics(db, wallet_address)


# --- AI assist -------------------------------------------------------------------

@router.post("/ai/skill-match", response_model=SkillMatchResponse)
@limiter.limit(settings.rate_limit_ai)
async def skill_match(
    request: Request,
    body: SkillMatchRequest,
    oracle: ScoringOracle = Depends(get_oracle),
):
    return await ai_assist.match_skills(body.skills, body.job_description, oracle)


@router.post(
    "/ai/career-advice", response_model=CareerAdviceResponse, dependencies=[Depends(remember_subject)]
)
@limiter.limit(settings.rate_limit_ai)
async def career_advice(
    request: Request,
    body: CareerAdviceRequest,
    db: Session = Depends(get_db),
    oracle: ScoringOracle = Depends(get_oracle),
):
    return await ai_assist.career_advice(db, body.resume_id, body.wallet_address, oracle)
