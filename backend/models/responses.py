from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ResumeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    wallet_address: str
    name: str
    email: str
    phone: str | None = None
    summary: str | None = None
    skills: list[str] = []
    education: list[dict] = []
    experience: list[dict] = []
    certifications: list[dict] = []
    projects: list[dict] = []
    linkedin_url: str | None = None
    github_url: str | None = None
    portfolio_url: str | None = None
    verification_status: str = "pending"
    verification_score: int | None = None
    ipfs_hash: str | None = None
    credential_id: int | None = None
    created_at: datetime | None = None


class VerificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    resume_id: str
    wallet_address: str
    score: int
    skills_verified: list[dict] = []
    education_verified: list[dict] = []
    experience_verified: list[dict] = []
    overall_assessment: str = ""
    red_flags: list[str] = []
    strengths: list[str] = []
    ipfs_hash: str
    credential_id: int | None = None
    tx_hash: str | None = None
    created_at: datetime | None = None


class VerificationStarted(BaseModel):
    verification: VerificationOut
    score: int
    status: str
    ipfs_hash: str


class CredentialBinding(BaseModel):
    resume_id: str
    credential_id: int
    tx_hash: str | None = None


class PublicQuestion(BaseModel):
    """A question as shown to the test taker: no answer, no explanation."""
    question: str
    options: list[str]


class RevealedQuestion(PublicQuestion):
    correct_answer: int
    explanation: str = ""


class SkillTestStarted(BaseModel):
    test_id: str
    skill: str
    questions: list[PublicQuestion]


class CertificateOut(BaseModel):
    wallet_address: str
    skill: str
    score: int
    verification_code: str
    ipfs_hash: str
    issued_at: datetime | None = None
    credential_id: int | None = None


class SkillTestResult(BaseModel):
    test_id: str
    score: int
    passed: bool
    correct_count: int
    total_questions: int
    certificate: CertificateOut | None = None


class SkillTestOut(BaseModel):
    id: str
    wallet_address: str
    skill: str
    status: str  # started | completed
    questions: list[PublicQuestion | RevealedQuestion]
    answers: list[int] | None = None
    score: int | None = None
    passed: bool | None = None
    certificate_code: str | None = None
    completed_at: datetime | None = None
    created_at: datetime | None = None


class CertificateTestSummary(BaseModel):
    total_questions: int
    correct_answers: int
    completed_at: datetime | None = None


class CertificateResolution(BaseModel):
    valid: bool = True
    certificate: CertificateOut
    test: CertificateTestSummary


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    wallet_address: str
    name: str | None = None
    email: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    is_employer: bool = False
    credential_ids: list[int] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SkillMatchResponse(BaseModel):
    match_score: int
    matched_skills: list[str] = []
    missing_skills: list[str] = []
    recommendations: list[str] = []


class CareerAdviceResponse(BaseModel):
    advice: str


class ActivityEntry(BaseModel):
    title: str
    timestamp: datetime


class AnalyticsResponse(BaseModel):
    resume_count: int = 0
    verification_count: int = 0
    verification_score: int = 0
    credential_count: int = 0
    certificate_count: int = 0
    profile_strength: int = 0
    recent_activity: list[ActivityEntry] = []
