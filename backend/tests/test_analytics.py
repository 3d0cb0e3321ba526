"""Tests for the subject analytics summary."""

import pytest

from factories import OWNER, make_assessment, make_submission
from models.requests import ProfileUpdate
from services import resume_service
from services.analytics import subject_analytics
from services.verification_pipeline import run_verification


def test_empty_subject(db):
    summary = subject_analytics(db, OWNER)
    assert summary.resume_count == 0
    assert summary.verification_score == 0
    assert summary.profile_strength == 0
    assert summary.recent_activity == []


@pytest.mark.asyncio
async def test_summary_counts(db, oracle, blob_store):
    resume_service.upsert_profile(db, ProfileUpdate(wallet_address=OWNER, name="Ada", email="ada@example.com"))
    first = resume_service.submit_resume(db, make_submission())
    second = resume_service.submit_resume(db, make_submission(name="Ada L."))

    oracle.assessment = make_assessment(80)
    await run_verification(db, first.id, OWNER, oracle, blob_store)
    oracle.assessment = make_assessment(41)
    await run_verification(db, second.id, OWNER, oracle, blob_store)

    summary = subject_analytics(db, OWNER)

    assert summary.resume_count == 2
    assert summary.verification_count == 2
    assert summary.verification_score == 60  # (80 + 41) / 2 = 60.5, banker's rounding
    assert summary.credential_count == 1
    assert summary.profile_strength == 100
    assert len(summary.recent_activity) == 4
    timestamps = [a.timestamp for a in summary.recent_activity]
    assert timestamps == sorted(timestamps, reverse=True)
