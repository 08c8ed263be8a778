"""Tests for the intake wizard state machine."""

from datetime import datetime

import pytest

from intake import (
    FieldUpdateError,
    IntakeSession,
    IntakeStage,
    InvalidTransitionError,
    NOTICE_COMPLETE_ALL,
    NOTICE_FILL_ALL,
    NOTICE_SUBMITTED,
    NOTICE_SUBMIT_FAILED,
    validate_basic_info,
)
from localization import Locale
from models import UNANSWERED
from scoring import RiskTier
from webhook import DispatchResult


def _recording_dispatcher(calls, result=None):
    def dispatch(payload):
        calls.append(payload)
        return result or DispatchResult(success=True, mode="DRY_RUN", result="dry_run")
    return dispatch


def test_new_session_starts_empty():
    session = IntakeSession()
    assert session.stage == IntakeStage.BASIC_INFO
    assert session.locale == Locale.ZH
    assert session.draft.address == ""
    assert session.draft.cat_count_score == UNANSWERED
    assert session.progress_percent() == 0


def test_next_blocked_until_basic_info_complete(basic_info):
    session = IntakeSession()
    basic_info["window_count"] = ""
    session.update_fields(basic_info)

    step = session.next()

    assert not step.advanced
    assert step.stage == IntakeStage.BASIC_INFO
    assert step.notice is NOTICE_FILL_ALL


def test_whitespace_only_counts_as_empty(basic_info):
    session = IntakeSession()
    basic_info["address"] = "   "
    session.update_fields(basic_info)
    assert validate_basic_info(session.draft) == (False, ["address"])


def test_door_count_is_optional(basic_info):
    session = IntakeSession()
    session.update_fields(basic_info)
    step = session.next()
    assert step.advanced
    assert session.stage == IntakeStage.SCORED_QUESTIONS


def test_unanswered_question_blocks(basic_info, low_answers):
    session = IntakeSession()
    session.update_fields(basic_info)
    session.next()
    low_answers["personality_score"] = None
    session.update_fields(low_answers)

    step = session.next()

    assert not step.advanced
    assert step.notice is NOTICE_COMPLETE_ALL
    assert session.draft.personality_score == UNANSWERED


def test_zero_cats_is_not_a_valid_answer(basic_info, low_answers):
    session = IntakeSession()
    session.update_fields(basic_info)
    session.next()
    low_answers["cat_count_score"] = 0
    session.update_fields(low_answers)
    assert not session.next().advanced


def test_scores_accept_numeric_strings():
    session = IntakeSession()
    session.update_field("structure_score", " 2 ")
    assert session.draft.structure_score == 2


@pytest.mark.parametrize("value", [True, "two", 1.5, [1]])
def test_scores_reject_non_integers(value):
    session = IntakeSession()
    with pytest.raises(FieldUpdateError):
        session.update_field("structure_score", value)


def test_unknown_field_rejects_whole_update(basic_info):
    session = IntakeSession()
    basic_info["favourite_toy"] = "string"
    with pytest.raises(FieldUpdateError, match="favourite_toy"):
        session.update_fields(basic_info)
    assert session.draft.address == ""


def test_bad_value_rejects_whole_update():
    session = IntakeSession()
    with pytest.raises(FieldUpdateError, match="cat_count_score"):
        session.update_fields({"address": "Flat 1", "cat_count_score": "abc"})
    assert session.draft.address == ""
    assert session.draft.cat_count_score == UNANSWERED


def test_set_notice_replaces_current_notice():
    session = IntakeSession()
    session.set_notice(NOTICE_SUBMIT_FAILED)
    assert session.to_dict()["notice"]["level"] == "warning"
    session.set_notice(None)
    assert session.notice is None


def test_back_keeps_answers(confirmed_session):
    step = confirmed_session.back()
    assert step.stage == IntakeStage.SCORED_QUESTIONS
    step = confirmed_session.back()
    assert step.stage == IntakeStage.BASIC_INFO
    assert confirmed_session.draft.address == "Flat 12A, Harbour View, Tai Koo"
    assert confirmed_session.draft.personality_score == 2


def test_back_from_first_stage_is_rejected():
    with pytest.raises(InvalidTransitionError):
        IntakeSession().back()


def test_next_from_confirmation_is_rejected(confirmed_session):
    with pytest.raises(InvalidTransitionError):
        confirmed_session.next()


def test_submit_only_from_confirmation():
    with pytest.raises(InvalidTransitionError):
        IntakeSession().submit(dispatcher=_recording_dispatcher([]))


def test_submit_posts_once_and_scores(confirmed_session):
    calls = []
    step = confirmed_session.submit(
        dispatcher=_recording_dispatcher(calls),
        now=datetime(2024, 3, 5, 14, 7, 9)
    )

    assert step.advanced
    assert step.notice is NOTICE_SUBMITTED
    assert confirmed_session.stage == IntakeStage.SUBMITTED
    assert confirmed_session.assessment.score == 6
    assert confirmed_session.assessment.tier == RiskTier.LOW
    assert len(calls) == 1
    assert calls[0]["totalScore"] == 6
    assert calls[0]["timestamp"] == "05/03/2024 14:07:09"


def test_failed_dispatch_still_reaches_submitted(confirmed_session):
    failed = DispatchResult(success=False, mode="LIVE", result="failed", error="timed out")
    step = confirmed_session.submit(dispatcher=_recording_dispatcher([], failed))

    assert confirmed_session.stage == IntakeStage.SUBMITTED
    assert step.notice is NOTICE_SUBMIT_FAILED
    assert confirmed_session.assessment.score == 6
    assert confirmed_session.assessment.tier == RiskTier.LOW


def test_raising_dispatcher_is_contained(confirmed_session):
    def explode(payload):
        raise RuntimeError("socket closed")

    step = confirmed_session.submit(dispatcher=explode)

    assert confirmed_session.stage == IntakeStage.SUBMITTED
    assert step.notice is NOTICE_SUBMIT_FAILED
    assert confirmed_session.last_dispatch.error == "socket closed"
    assert confirmed_session.assessment.tier == RiskTier.LOW


def test_answers_locked_after_submit(confirmed_session):
    confirmed_session.submit(dispatcher=_recording_dispatcher([]))
    with pytest.raises(InvalidTransitionError):
        confirmed_session.update_field("address", "elsewhere")


def test_back_from_submitted_drops_assessment(confirmed_session):
    confirmed_session.submit(dispatcher=_recording_dispatcher([]))
    step = confirmed_session.back()
    assert step.stage == IntakeStage.CONFIRMATION
    assert confirmed_session.assessment is None
    assert confirmed_session.draft.cat_count_score == 2


def test_resubmit_after_back_posts_again(confirmed_session):
    calls = []
    dispatcher = _recording_dispatcher(calls)
    confirmed_session.submit(dispatcher=dispatcher)
    confirmed_session.back()
    confirmed_session.submit(dispatcher=dispatcher)
    assert len(calls) == 2


def test_reset_clears_everything(confirmed_session):
    confirmed_session.submit(dispatcher=_recording_dispatcher([]))
    confirmed_session.reset()

    assert confirmed_session.stage == IntakeStage.BASIC_INFO
    assert confirmed_session.assessment is None
    assert confirmed_session.notice is None
    assert confirmed_session.draft.address == ""
    assert confirmed_session.draft.cat_count_score == UNANSWERED


def test_locale_switch_keeps_answers(confirmed_session):
    confirmed_session.set_locale(Locale.ZH)
    assert confirmed_session.locale == Locale.ZH
    assert confirmed_session.draft.window_count == "6"
    assert confirmed_session.stage == IntakeStage.CONFIRMATION


def test_progress_by_stage(confirmed_session):
    assert confirmed_session.progress_percent() == 67
    confirmed_session.submit(dispatcher=_recording_dispatcher([]))
    assert confirmed_session.progress_percent() == 100


def test_to_dict_renders_notice_in_session_locale():
    session = IntakeSession(locale=Locale.EN)
    session.next()
    data = session.to_dict()
    assert data["stage"] == "basic_info"
    assert data["step"] == 1
    assert data["total_steps"] == 3
    assert data["notice"]["level"] == "error"
    assert data["notice"]["title"] == "Please fill in all required fields"
    assert data["assessment"] is None


def test_to_dict_includes_assessment(confirmed_session):
    confirmed_session.submit(dispatcher=_recording_dispatcher([]))
    assessment = confirmed_session.to_dict()["assessment"]
    assert assessment["score"] == 6
    assert assessment["max_score"] == 19
    assert assessment["tier"] == "low"
    assert assessment["color"] == "risk-low"
    assert assessment["dispatch"] == "dry_run"
