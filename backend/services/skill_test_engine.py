"""Skill-test engine: generated multiple-choice tests and certificates.

State machine per test:
    started  (questions stored, completed_at IS NULL)
      └─ submit → completed(passed) | completed(failed)

Completion is a conditional UPDATE on ``completed_at IS NULL`` so that of two
racing submissions exactly one grades the test. A passed test gets its
Certificate in the same transaction, under a verification code that is unique
across the whole store.
"""

import logging
import secrets

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from config import PASS_THRESHOLD, settings
from database import Certificate, SkillTest, commit, normalize_subject, utcnow
from models.responses import (
    CertificateOut,
    PublicQuestion,
    RevealedQuestion,
    SkillTestOut,
    SkillTestResult,
    SkillTestStarted,
)
from models.schemas.question_set import OPTIONS_PER_QUESTION, Question
from services.blob_store import BlobStore
from services.errors import (
    AlreadyCompleted,
    AuthorizationError,
    BadInput,
    Conflict,
    NotFound,
    ScoringUnavailable,
    StorageUnavailable,
)
from services.resume_service import require_subject
from services.scoring_oracle import ScoringOracle

logger = logging.getLogger(__name__)

CODE_BYTES = 8
CODE_DRAWS = 2  # first draw + one regeneration


def generate_verification_code() -> str:
    """16 uppercase hex characters from 8 cryptographically random bytes."""
    return secrets.token_hex(CODE_BYTES).upper()


def grade(questions: list[dict], answers: list[int]) -> tuple[int, int, bool]:
    """Return (correct_count, score, passed).

    score = round(100 * correct / total), halves rounded up.
    """
    total = len(questions)
    correct = sum(1 for q, a in zip(questions, answers) if a == q["correct_answer"])
    score = (200 * correct + total) // (2 * total)
    return correct, score, score >= PASS_THRESHOLD


def _check_shape(questions: list[Question], count: int) -> None:
    if len(questions) != count:
        raise ScoringUnavailable(f"Expected {count} questions, got {len(questions)}")
    for i, q in enumerate(questions):
        if len(q.options) != OPTIONS_PER_QUESTION:
            raise ScoringUnavailable(f"Question {i + 1} has {len(q.options)} options")
        if not 0 <= q.correct_answer < OPTIONS_PER_QUESTION:
            raise ScoringUnavailable(f"Question {i + 1} has correct answer {q.correct_answer}")


def _load_owned(db: Session, test_id: str, wallet_address: str) -> tuple[SkillTest, str]:
    test = db.get(SkillTest, test_id)
    if test is None:
        raise NotFound(f"Test {test_id} not found")
    subject = normalize_subject(wallet_address or "")
    if test.wallet_address != subject:
        logger.warning("Wallet mismatch on test %s: requester=%s", test_id, subject)
        raise AuthorizationError("Test belongs to a different wallet")
    return test, subject


async def start_test(
    db: Session,
    wallet_address: str,
    skill: str,
    oracle: ScoringOracle,
) -> SkillTestStarted:
    """Generate questions for ``skill`` and persist a started test."""
    subject = require_subject(wallet_address)
    skill = (skill or "").strip()
    if not skill:
        raise BadInput("Skill is required")

    count = settings.question_count
    questions = await oracle.generate_questions(skill, count)
    _check_shape(questions, count)

    test = SkillTest(
        wallet_address=subject,
        skill=skill,
        questions=[q.model_dump() for q in questions],
    )
    db.add(test)
    commit(db)
    logger.info("Started %s test %s for %s", skill, test.id, subject)

    return SkillTestStarted(
        test_id=test.id,
        skill=skill,
        questions=[PublicQuestion(question=q.question, options=q.options) for q in questions],
    )


def _code_in_use(db: Session, code: str) -> bool:
    stmt = select(Certificate.id).where(Certificate.verification_code == code)
    return db.scalars(stmt).first() is not None


def _mark_completed(db: Session, test_id: str, **values) -> None:
    """started -> completed, only if nobody else got there first."""
    result = db.execute(
        update(SkillTest)
        .where(SkillTest.id == test_id, SkillTest.completed_at.is_(None))
        .values(**values)
    )
    if result.rowcount != 1:
        db.rollback()
        raise AlreadyCompleted(f"Test {test_id} has already been submitted")


async def submit_test(
    db: Session,
    test_id: str,
    wallet_address: str,
    answers: list[int],
    blob_store: BlobStore,
) -> SkillTestResult:
    """Grade a started test once; issue a Certificate when it passes."""
    test, subject = _load_owned(db, test_id, wallet_address)
    if test.is_completed:
        raise AlreadyCompleted(f"Test {test_id} has already been submitted")

    questions = test.questions
    if len(answers) != len(questions):
        raise BadInput(f"Expected {len(questions)} answers, got {len(answers)}")

    correct, score, passed = grade(questions, answers)
    completed_at = utcnow()
    skill = test.skill
    result = SkillTestResult(
        test_id=test_id,
        score=score,
        passed=passed,
        correct_count=correct,
        total_questions=len(questions),
    )

    if not passed:
        _mark_completed(db, test_id, answers=list(answers), score=score, passed=False,
                        completed_at=completed_at)
        commit(db)
        logger.info("Test %s failed with %d%%", test_id, score)
        return result

    for attempt in range(CODE_DRAWS):
        code = generate_verification_code()
        if _code_in_use(db, code):
            logger.warning("Verification code collision on draw %d for test %s", attempt + 1, test_id)
            continue

        ipfs_hash = await blob_store.put({
            "walletAddress": subject,
            "skill": skill,
            "score": score,
            "verificationCode": code,
            "issuedAt": completed_at.isoformat() + "Z",
        })

        _mark_completed(db, test_id, answers=list(answers), score=score, passed=True,
                        completed_at=completed_at, certificate_code=code)
        certificate = Certificate(
            wallet_address=subject,
            test_id=test_id,
            skill=skill,
            score=score,
            verification_code=code,
            ipfs_hash=ipfs_hash,
            created_at=completed_at,
        )
        db.add(certificate)
        try:
            db.commit()
        except IntegrityError:
            # another test claimed the same code between the check and the insert
            db.rollback()
            logger.warning("Verification code collision on insert, draw %d for test %s",
                           attempt + 1, test_id)
            continue
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Failed to record certificate for test %s: %s", test_id, e)
            raise StorageUnavailable("Record store write failed") from e

        logger.info("Test %s passed with %d%%, certificate %s", test_id, score, code)
        result.certificate = CertificateOut(
            wallet_address=subject,
            skill=skill,
            score=score,
            verification_code=code,
            ipfs_hash=ipfs_hash,
            issued_at=completed_at,
        )
        return result

    logger.error("Could not draw a unique verification code for test %s", test_id)
    raise Conflict("Could not allocate a unique verification code, retry the submission")


def _to_test_out(test: SkillTest) -> SkillTestOut:
    if test.is_completed:
        questions = [
            RevealedQuestion(
                question=q["question"],
                options=q["options"],
                correct_answer=q["correct_answer"],
                explanation=q.get("explanation", ""),
            )
            for q in test.questions
        ]
    else:
        questions = [PublicQuestion(question=q["question"], options=q["options"]) for q in test.questions]

    return SkillTestOut(
        id=test.id,
        wallet_address=test.wallet_address,
        skill=test.skill,
        status="completed" if test.is_completed else "started",
        questions=questions,
        answers=test.answers,
        score=test.score,
        passed=test.passed,
        certificate_code=test.certificate_code,
        completed_at=test.completed_at,
        created_at=test.created_at,
    )


def get_test(db: Session, test_id: str, wallet_address: str) -> SkillTestOut:
    """Owner-only view; answers are revealed once the test is completed."""
    test, _ = _load_owned(db, test_id, wallet_address)
    return _to_test_out(test)


def list_tests(db: Session, wallet_address: str) -> list[SkillTestOut]:
    subject = require_subject(wallet_address)
    stmt = (
        select(SkillTest)
        .where(SkillTest.wallet_address == subject)
        .order_by(SkillTest.created_at.desc())
    )
    return [_to_test_out(t) for t in db.scalars(stmt)]
