"""Tests for resume submission and profiles."""

import pytest

from database import User
from factories import OTHER, OWNER, make_submission
from models.requests import ProfileUpdate
from services import resume_service
from services.errors import BadInput, NotFound


class TestSubmitResume:
    def test_starts_pending_with_lowercased_owner(self, db):
        resume = resume_service.submit_resume(db, make_submission())

        assert resume.wallet_address == OWNER.lower()
        assert resume.verification_status == "pending"
        assert resume.verification_score is None
        assert resume.credential_id is None
        assert resume.skills == ["Go", "SQL"]
        assert resume.education[0]["degree"] == "BSc"

    def test_creates_user_lazily_once(self, db):
        resume_service.submit_resume(db, make_submission())
        resume_service.submit_resume(db, make_submission(name="Ada L."))

        user = db.get(User, OWNER.lower())
        assert user is not None
        assert user.credential_ids == []
        assert db.query(User).count() == 1

    def test_list_is_owner_scoped(self, db):
        resume_service.submit_resume(db, make_submission())
        resume_service.submit_resume(db, make_submission(wallet_address=OTHER))

        resumes = resume_service.list_resumes(db, OWNER.upper())
        assert len(resumes) == 1
        assert resumes[0].wallet_address == OWNER.lower()

    def test_get_unknown(self, db):
        with pytest.raises(NotFound):
            resume_service.get_resume(db, "missing")

    def test_blank_wallet(self, db):
        with pytest.raises(BadInput):
            resume_service.submit_resume(db, make_submission(wallet_address="   "))


class TestProfile:
    def test_upsert_creates_then_updates(self, db):
        resume_service.upsert_profile(db, ProfileUpdate(wallet_address=OWNER, name="Ada"))
        user = resume_service.upsert_profile(db, ProfileUpdate(wallet_address=OWNER, bio="Engines"))

        assert user.name == "Ada"
        assert user.bio == "Engines"
        assert user.wallet_address == OWNER.lower()

    def test_profile_cannot_touch_credentials(self, db):
        user = resume_service.ensure_user(db, OWNER.lower())
        user.credential_ids = [5]
        db.commit()

        updated = resume_service.upsert_profile(db, ProfileUpdate(wallet_address=OWNER, email="ada@example.com"))
        assert updated.credential_ids == [5]

    def test_missing_profile(self, db):
        assert resume_service.get_profile(db, OWNER) is None
