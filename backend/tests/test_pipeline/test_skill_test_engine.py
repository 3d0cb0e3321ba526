"""Tests for the skill-test engine."""

import re
from itertools import chain, repeat

import pytest
from sqlalchemy import func, select

from database import Certificate, SkillTest
from factories import OTHER, OWNER, answers_with_correct, make_questions
from models.schemas.question_set import Question
from services import skill_test_engine
from services.errors import (
    AlreadyCompleted,
    AuthorizationError,
    BadInput,
    Conflict,
    NotFound,
    ScoringUnavailable,
)
from services.skill_test_engine import (
    generate_verification_code,
    get_test,
    grade,
    list_tests,
    start_test,
    submit_test,
)

CODE_PATTERN = re.compile(r"^[0-9A-F]{16}$")


def _stored_questions(db, test_id):
    return db.get(SkillTest, test_id).questions


def _certificate_count(db):
    return db.scalar(select(func.count()).select_from(Certificate))


def _scripted_codes(monkeypatch, *codes):
    it = chain(codes, repeat("F" * 16))
    monkeypatch.setattr(skill_test_engine, "generate_verification_code", lambda: next(it))


class TestGrade:
    @pytest.mark.parametrize("correct", range(11))
    def test_every_correct_count(self, correct):
        questions = [q.model_dump() for q in make_questions(10)]
        answers = answers_with_correct(questions, correct)

        count, score, passed = grade(questions, answers)

        assert count == correct
        assert score == round(100 * correct / 10)
        assert passed == (score >= 60)

    def test_halves_round_up(self):
        questions = [q.model_dump() for q in make_questions(8)]
        _, score, _ = grade(questions, answers_with_correct(questions, 1))
        assert score == 13  # 12.5


class TestVerificationCode:
    def test_format(self):
        assert CODE_PATTERN.match(generate_verification_code())

    def test_ten_thousand_codes_are_unique(self):
        codes = {generate_verification_code() for _ in range(10_000)}
        assert len(codes) == 10_000
        assert all(CODE_PATTERN.match(c) for c in codes)


class TestStartTest:
    @pytest.mark.asyncio
    async def test_creates_started_test_without_answers(self, db, oracle):
        started = await start_test(db, OWNER, "Rust", oracle)

        assert started.skill == "Rust"
        assert len(started.questions) == 10
        dumped = started.model_dump()
        assert "correct_answer" not in dumped["questions"][0]
        assert "explanation" not in dumped["questions"][0]

        test = db.get(SkillTest, started.test_id)
        assert test.wallet_address == OWNER.lower()
        assert test.completed_at is None
        assert test.answers is None
        assert oracle.calls == [("generate_questions", "Rust", 10)]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("skill", ["", "   "])
    async def test_blank_skill(self, db, oracle, skill):
        with pytest.raises(BadInput):
            await start_test(db, OWNER, skill, oracle)
        assert oracle.calls == []

    @pytest.mark.asyncio
    async def test_wrong_question_count(self, db, oracle):
        oracle.questions = make_questions(9)
        with pytest.raises(ScoringUnavailable):
            await start_test(db, OWNER, "Rust", oracle)
        assert db.scalar(select(func.count()).select_from(SkillTest)) == 0

    @pytest.mark.asyncio
    async def test_bad_option_shape(self, db, oracle):
        bad = Question.model_construct(question="?", options=["a", "b", "c"], correct_answer=0, explanation="")
        oracle.questions = make_questions(9) + [bad]
        with pytest.raises(ScoringUnavailable):
            await start_test(db, OWNER, "Rust", oracle)


class TestSubmitTest:
    @pytest.mark.asyncio
    async def test_pass_issues_certificate(self, db, oracle, blob_store):
        started = await start_test(db, OWNER, "Rust", oracle)
        answers = answers_with_correct(_stored_questions(db, started.test_id), 7)

        result = await submit_test(db, started.test_id, OWNER, answers, blob_store)

        assert result.score == 70
        assert result.passed is True
        assert result.correct_count == 7
        assert result.total_questions == 10
        code = result.certificate.verification_code
        assert CODE_PATTERN.match(code)

        test = db.get(SkillTest, started.test_id)
        assert test.certificate_code == code
        assert test.answers == answers
        assert test.completed_at is not None

        pinned = await blob_store.get(result.certificate.ipfs_hash)
        assert pinned["verificationCode"] == code
        assert pinned["skill"] == "Rust"
        assert pinned["score"] == 70

    @pytest.mark.asyncio
    async def test_fail_issues_no_certificate(self, db, oracle, blob_store):
        started = await start_test(db, OWNER, "Rust", oracle)
        answers = answers_with_correct(_stored_questions(db, started.test_id), 5)

        result = await submit_test(db, started.test_id, OWNER, answers, blob_store)

        assert result.score == 50
        assert result.passed is False
        assert result.certificate is None
        assert _certificate_count(db) == 0
        assert len(blob_store) == 0
        assert db.get(SkillTest, started.test_id).certificate_code is None

    @pytest.mark.asyncio
    async def test_second_submission_is_rejected(self, db, oracle, blob_store):
        started = await start_test(db, OWNER, "Rust", oracle)
        questions = _stored_questions(db, started.test_id)

        first = await submit_test(db, started.test_id, OWNER, answers_with_correct(questions, 10), blob_store)
        with pytest.raises(AlreadyCompleted):
            await submit_test(db, started.test_id, OWNER, answers_with_correct(questions, 0), blob_store)

        test = db.get(SkillTest, started.test_id)
        assert test.score == first.score == 100
        assert _certificate_count(db) == 1

    @pytest.mark.asyncio
    async def test_losing_racer_gets_already_completed(self, db, session_factory, oracle, blob_store):
        started = await start_test(db, OWNER, "Rust", oracle)
        questions = _stored_questions(db, started.test_id)

        # load the test in a second session while it is still started
        other = session_factory()
        stale = other.get(SkillTest, started.test_id)
        assert stale.completed_at is None

        await submit_test(db, started.test_id, OWNER, answers_with_correct(questions, 8), blob_store)

        with pytest.raises(AlreadyCompleted):
            await submit_test(other, started.test_id, OWNER, answers_with_correct(questions, 9), blob_store)
        other.close()

        assert db.get(SkillTest, started.test_id).score == 80
        assert _certificate_count(db) == 1

    @pytest.mark.asyncio
    async def test_answer_count_must_match(self, db, oracle, blob_store):
        started = await start_test(db, OWNER, "Rust", oracle)
        with pytest.raises(BadInput):
            await submit_test(db, started.test_id, OWNER, [0, 1, 2], blob_store)
        assert db.get(SkillTest, started.test_id).completed_at is None

    @pytest.mark.asyncio
    async def test_other_wallet(self, db, oracle, blob_store):
        started = await start_test(db, OWNER, "Rust", oracle)
        with pytest.raises(AuthorizationError):
            await submit_test(db, started.test_id, OTHER, [0] * 10, blob_store)

    @pytest.mark.asyncio
    async def test_unknown_test(self, db, blob_store):
        with pytest.raises(NotFound):
            await submit_test(db, "missing", OWNER, [0] * 10, blob_store)


class TestCodeCollisions:
    async def _pass(self, db, oracle, blob_store):
        started = await start_test(db, OWNER, "Rust", oracle)
        answers = answers_with_correct(_stored_questions(db, started.test_id), 10)
        return started.test_id, answers

    @pytest.mark.asyncio
    async def test_single_collision_is_redrawn(self, db, oracle, blob_store, monkeypatch):
        taken = "A" * 16
        _scripted_codes(monkeypatch, taken, taken, "B" * 16)

        test_id, answers = await self._pass(db, oracle, blob_store)
        await submit_test(db, test_id, OWNER, answers, blob_store)

        test_id, answers = await self._pass(db, oracle, blob_store)
        result = await submit_test(db, test_id, OWNER, answers, blob_store)

        assert result.certificate.verification_code == "B" * 16

    @pytest.mark.asyncio
    async def test_two_collisions_raise_conflict_without_state_change(self, db, oracle, blob_store, monkeypatch):
        taken = "A" * 16
        _scripted_codes(monkeypatch, taken, taken, taken)

        test_id, answers = await self._pass(db, oracle, blob_store)
        await submit_test(db, test_id, OWNER, answers, blob_store)

        test_id, answers = await self._pass(db, oracle, blob_store)
        with pytest.raises(Conflict):
            await submit_test(db, test_id, OWNER, answers, blob_store)

        test = db.get(SkillTest, test_id)
        assert test.completed_at is None
        assert test.score is None
        assert _certificate_count(db) == 1

    @pytest.mark.asyncio
    async def test_collision_on_insert_is_redrawn(self, db, oracle, blob_store, monkeypatch):
        """The unique index catches a code claimed after the pre-check."""
        taken = "C" * 16
        _scripted_codes(monkeypatch, taken, taken, "D" * 16)

        test_id, answers = await self._pass(db, oracle, blob_store)
        await submit_test(db, test_id, OWNER, answers, blob_store)

        monkeypatch.setattr(skill_test_engine, "_code_in_use", lambda db, code: False)
        test_id, answers = await self._pass(db, oracle, blob_store)
        result = await submit_test(db, test_id, OWNER, answers, blob_store)

        assert result.certificate.verification_code == "D" * 16
        assert db.get(SkillTest, test_id).certificate_code == "D" * 16
        assert _certificate_count(db) == 2


class TestReads:
    @pytest.mark.asyncio
    async def test_answers_hidden_until_completed(self, db, oracle, blob_store):
        started = await start_test(db, OWNER, "Rust", oracle)

        view = get_test(db, started.test_id, OWNER)
        assert view.status == "started"
        assert "correct_answer" not in view.model_dump()["questions"][0]

        answers = answers_with_correct(_stored_questions(db, started.test_id), 6)
        await submit_test(db, started.test_id, OWNER, answers, blob_store)

        view = get_test(db, started.test_id, OWNER)
        assert view.status == "completed"
        assert view.passed is True
        assert view.model_dump()["questions"][0]["correct_answer"] == 0

    @pytest.mark.asyncio
    async def test_get_is_owner_scoped(self, db, oracle):
        started = await start_test(db, OWNER, "Rust", oracle)
        with pytest.raises(AuthorizationError):
            get_test(db, started.test_id, OTHER)

    @pytest.mark.asyncio
    async def test_list_tests(self, db, oracle):
        await start_test(db, OWNER, "Rust", oracle)
        await start_test(db, OWNER, "Go", oracle)
        await start_test(db, OTHER, "SQL", oracle)

        tests = list_tests(db, OWNER.upper())
        assert {t.skill for t in tests} == {"Rust", "Go"}
