"""Pytest configuration and fixtures."""

import os
import time

import pytest
from itsdangerous import TimestampSigner, URLSafeTimedSerializer

import config
import webhook
from intake import IntakeSession, IntakeStage
from localization import Locale
from models import DraftRecord
from session_utils import SESSION_SALT, get_session_secret, registry


BASIC_INFO = {
    "address": "Flat 12A, Harbour View, Tai Koo",
    "building_type": "Apartment",
    "floor_level": "18",
    "window_count": "6",
    "door_count": "",
    "heaviest_cat_weight": "5.2",
}

# 2 + 1 + 0 + 2 + 0 + 1 = 6, the top of the low tier
LOW_ANSWERS = {
    "cat_count_score": 2,
    "edge_behavior_score": 1,
    "structure_score": 0,
    "personality_score": 2,
    "environment_score": 0,
    "expectation_score": 1,
}


@pytest.fixture(scope="session", autouse=True)
def setup_test_env():
    """Set up test environment variables."""
    os.environ["WEBHOOK_MODE"] = "DRY_RUN"
    os.environ["WEBHOOK_LABEL_LOCALE"] = "zh"
    os.environ["DEFAULT_LOCALE"] = "zh"
    os.environ["SESSION_SECRET"] = "test-session-secret"
    os.environ.pop("WEBHOOK_URL", None)
    os.environ.pop("WEBHOOK_TIMEOUT", None)
    os.environ.pop("REPORT_FONT_PATH", None)


@pytest.fixture(autouse=True)
def clean_state():
    """Drop in-memory sessions and dispatch history between tests."""
    registry.clear()
    webhook._DISPATCH_LOG.clear()
    yield
    registry.clear()
    webhook._DISPATCH_LOG.clear()


@pytest.fixture
def basic_info():
    return dict(BASIC_INFO)


@pytest.fixture
def low_answers():
    return dict(LOW_ANSWERS)


@pytest.fixture
def filled_draft():
    return DraftRecord(**BASIC_INFO, **LOW_ANSWERS)


@pytest.fixture
def confirmed_session():
    """An English session sitting on the confirmation step."""
    session = IntakeSession(locale=Locale.EN)
    session.update_fields(BASIC_INFO)
    session.next()
    session.update_fields(LOW_ANSWERS)
    session.next()
    assert session.stage == IntakeStage.CONFIRMATION
    return session


@pytest.fixture
def no_report_font(monkeypatch):
    """Core fonts only: no REPORT_FONT_PATH and nothing found on disk."""
    monkeypatch.delenv("REPORT_FONT_PATH", raising=False)
    monkeypatch.setattr(config, "discover_report_font", lambda: None)


@pytest.fixture
def token_signed_ago():
    """Build a session cookie value whose signature is `seconds` old."""
    def build(session_id, seconds):
        class BackdatedSigner(TimestampSigner):
            def get_timestamp(self):
                return int(time.time()) - seconds

        serializer = URLSafeTimedSerializer(get_session_secret(), salt=SESSION_SALT, signer=BackdatedSigner)
        return serializer.dumps({"session_id": session_id})
    return build
