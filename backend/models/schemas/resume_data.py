"""Structured resume entries and the assessable subset sent to the oracle."""

from pydantic import BaseModel


class EducationEntry(BaseModel):
    institution: str = ""
    degree: str = ""
    field: str = ""
    start_date: str = ""
    end_date: str = ""
    gpa: str | None = None


class ExperienceEntry(BaseModel):
    company: str = ""
    title: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""


class CertificationEntry(BaseModel):
    name: str = ""
    issuer: str = ""
    date: str = ""
    url: str | None = None


class ProjectEntry(BaseModel):
    name: str = ""
    description: str = ""
    technologies: list[str] = []
    url: str | None = None
    github_url: str | None = None


class ResumeClaims(BaseModel):
    """The claims the scoring oracle is asked to assess.

    Phone number, portfolio link and all derived verification fields are
    deliberately left out.
    """
    name: str
    email: str = ""
    summary: str = ""
    skills: list[str] = []
    education: list[EducationEntry] = []
    experience: list[ExperienceEntry] = []
    certifications: list[CertificationEntry] = []
    projects: list[ProjectEntry] = []
    github_url: str | None = None
    linkedin_url: str | None = None
