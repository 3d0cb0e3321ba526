"""
Record store: SQLAlchemy ORM models for resumes, verifications, skill tests,
certificates and user profiles.

Every row is owned by exactly one subject, identified by its lowercased
wallet address.
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    create_engine,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from config import settings
from services.errors import StorageUnavailable

logger = logging.getLogger(__name__)

Base = declarative_base()

STATUS_PENDING = "pending"
STATUS_VERIFIED = "verified"
STATUS_REJECTED = "rejected"


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp (SQLite does not keep tzinfo)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def normalize_subject(wallet_address: str) -> str:
    return wallet_address.strip().lower()


class User(Base):
    """Thin profile plus the set of minted credential token ids."""
    __tablename__ = "users"

    wallet_address = Column(String(64), primary_key=True)
    name = Column(String(255))
    email = Column(String(255))
    bio = Column(Text)
    avatar_url = Column(String(512))
    is_employer = Column(Boolean, default=False, nullable=False)
    credential_ids = Column(JSON, default=list, nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<User(wallet={self.wallet_address}, credentials={self.credential_ids})>"


class Resume(Base):
    """
    Snapshot of a subject's claimed qualifications plus the derived
    verification fields written by the pipeline and the credential binder.
    """
    __tablename__ = "resumes"

    id = Column(String(36), primary_key=True, default=_new_id)
    wallet_address = Column(String(64), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(64))
    summary = Column(Text)

    # Ordered lists stored as JSON
    skills = Column(JSON, default=list, nullable=False)
    education = Column(JSON, default=list, nullable=False)
    experience = Column(JSON, default=list, nullable=False)
    certifications = Column(JSON, default=list, nullable=False)
    projects = Column(JSON, default=list, nullable=False)

    linkedin_url = Column(String(512))
    github_url = Column(String(512))
    portfolio_url = Column(String(512))

    # Derived
    verification_status = Column(String(16), default=STATUS_PENDING, nullable=False)
    verification_score = Column(Integer)
    verification_report = Column(Text)
    ipfs_hash = Column(String(128))
    credential_id = Column(Integer)

    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Resume(id={self.id}, status={self.verification_status}, score={self.verification_score})>"


class Verification(Base):
    """
    One assessment run. Immutable except for the ledger linkage
    (credential_id, tx_hash), which is written at most once.
    """
    __tablename__ = "verifications"

    id = Column(String(36), primary_key=True, default=_new_id)
    resume_id = Column(String(36), ForeignKey("resumes.id"), nullable=False, index=True)
    wallet_address = Column(String(64), nullable=False, index=True)

    score = Column(Integer, nullable=False)
    ai_report = Column(Text, nullable=False)
    skills_verified = Column(JSON, default=list, nullable=False)
    education_verified = Column(JSON, default=list, nullable=False)
    experience_verified = Column(JSON, default=list, nullable=False)
    overall_assessment = Column(Text, nullable=False)
    red_flags = Column(JSON, default=list, nullable=False)
    strengths = Column(JSON, default=list, nullable=False)
    ipfs_hash = Column(String(128), nullable=False)

    credential_id = Column(Integer)
    tx_hash = Column(String(128))

    created_at = Column(DateTime, default=utcnow, index=True)

    def __repr__(self):
        return f"<Verification(id={self.id}, resume={self.resume_id}, score={self.score})>"


class SkillTest(Base):
    """
    A skill examination attempt. ``completed_at IS NULL`` means started;
    completion is a one-way conditional update.
    """
    __tablename__ = "skill_tests"

    id = Column(String(36), primary_key=True, default=_new_id)
    wallet_address = Column(String(64), nullable=False, index=True)
    skill = Column(String(255), nullable=False)

    questions = Column(JSON, nullable=False)
    answers = Column(JSON)
    score = Column(Integer)
    passed = Column(Boolean)
    certificate_code = Column(String(16))
    completed_at = Column(DateTime)

    created_at = Column(DateTime, default=utcnow, index=True)

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def __repr__(self):
        return f"<SkillTest(id={self.id}, skill={self.skill}, score={self.score})>"


class Certificate(Base):
    """Public proof of a passed skill test, looked up by verification code."""
    __tablename__ = "certificates"

    id = Column(String(36), primary_key=True, default=_new_id)
    wallet_address = Column(String(64), nullable=False, index=True)
    test_id = Column(String(36), ForeignKey("skill_tests.id"), nullable=False, unique=True)
    skill = Column(String(255), nullable=False)
    score = Column(Integer, nullable=False)
    verification_code = Column(String(16), nullable=False, unique=True, index=True)
    ipfs_hash = Column(String(128), nullable=False)

    credential_id = Column(Integer)
    tx_hash = Column(String(128))

    created_at = Column(DateTime, default=utcnow)

    def __repr__(self):
        return f"<Certificate(code={self.verification_code}, skill={self.skill}, score={self.score})>"


# Database connection setup
DATABASE_URL = settings.database_url

# Handle Heroku/Railway style PostgreSQL URLs
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, echo=False, connect_args=_connect_args)
SessionLocal = sessionmaker(autoflush=False, bind=engine)


def init_db(bind=None):
    """Create all tables."""
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Record store initialized")


def get_db():
    """Dependency for getting DB session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit(db) -> None:
    """Commit the session's pending writes as one unit.

    On failure nothing is kept: the session is rolled back and the error is
    raised as StorageUnavailable.
    """
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Record store write failed: %s", e)
        raise StorageUnavailable("Record store write failed") from e
