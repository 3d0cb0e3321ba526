from typing import Annotated

from pydantic import BaseModel, Field

from models.schemas.resume_data import (
    CertificationEntry,
    EducationEntry,
    ExperienceEntry,
    ProjectEntry,
)

WalletAddress = Annotated[str, Field(min_length=1, max_length=64, description="Subject wallet address")]


class ResumeSubmission(BaseModel):
    wallet_address: WalletAddress
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=1, max_length=255)
    phone: str | None = None
    summary: str = Field("", max_length=5000)
    skills: list[str] = []
    education: list[EducationEntry] = []
    experience: list[ExperienceEntry] = []
    certifications: list[CertificationEntry] = []
    projects: list[ProjectEntry] = []
    linkedin_url: str | None = None
    github_url: str | None = None
    portfolio_url: str | None = None


class VerifyRequest(BaseModel):
    resume_id: str = Field(..., min_length=1)
    wallet_address: WalletAddress


class CredentialBindRequest(BaseModel):
    resume_id: str = Field(..., min_length=1)
    wallet_address: WalletAddress
    credential_id: int = Field(..., ge=0, description="Ledger token id returned by the mint")
    tx_hash: str | None = Field(None, max_length=128)


class SkillTestStartRequest(BaseModel):
    wallet_address: WalletAddress
    skill: str = Field(..., max_length=100)


class SkillTestSubmitRequest(BaseModel):
    test_id: str = Field(..., min_length=1)
    wallet_address: WalletAddress
    answers: list[int]


class ProfileUpdate(BaseModel):
    wallet_address: WalletAddress
    name: str | None = Field(None, max_length=255)
    email: str | None = Field(None, max_length=255)
    bio: str | None = Field(None, max_length=2000)
    avatar_url: str | None = Field(None, max_length=512)
    is_employer: bool | None = None


class SkillMatchRequest(BaseModel):
    skills: list[str] = Field(..., min_length=1)
    job_description: str = Field(..., min_length=1, max_length=10000)


class CareerAdviceRequest(BaseModel):
    resume_id: str = Field(..., min_length=1)
    wallet_address: WalletAddress
