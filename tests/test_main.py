"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from main import app
from session_utils import SESSION_COOKIE_NAME, verify_session_token


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def submitted_client(client, basic_info, low_answers):
    client.post("/api/session/locale", json={"locale": "en"})
    client.post("/api/session/fields", json=basic_info)
    client.post("/api/session/next")
    client.post("/api/session/fields", json=low_answers)
    client.post("/api/session/next")
    response = client.post("/api/session/submit")
    assert response.json()["session"]["stage"] == "submitted"
    return client


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_first_visit_sets_cookie(client):
    response = client.get("/api/session")
    assert response.status_code == 200
    assert SESSION_COOKIE_NAME in response.cookies
    data = response.json()
    assert data["stage"] == "basic_info"
    assert data["locale"] == "zh"
    assert data["progress"] == 0


def test_questions_follow_session_locale(client):
    zh = client.get("/api/questions").json()
    client.post("/api/session/locale", json={"locale": "en"})
    en = client.get("/api/questions").json()

    assert len(zh["questions"]) == len(en["questions"]) == 6
    cat_count = en["questions"][0]
    assert cat_count["field"] == "cat_count_score"
    assert [o["value"] for o in cat_count["options"]] == [1, 2, 3, 4]
    assert cat_count["title"] == "1. Total number of cats at home?"
    assert [b["value"] for b in en["building_types"]] == ["Apartment", "House"]
    assert en["building_types"][1]["label"] == "House/Villa"


def test_incomplete_basic_info_returns_notice(client):
    response = client.post("/api/session/next")
    assert response.status_code == 200
    body = response.json()
    assert body["advanced"] is False
    assert body["session"]["stage"] == "basic_info"
    assert body["session"]["notice"]["level"] == "error"


def test_unknown_field_is_422(client):
    response = client.post("/api/session/fields", json={"favourite_toy": "string"})
    assert response.status_code == 422


def test_unknown_locale_is_422(client):
    response = client.post("/api/session/locale", json={"locale": "fr"})
    assert response.status_code == 422


def test_back_from_first_stage_is_409(client):
    assert client.post("/api/session/back").status_code == 409


def test_report_before_submit_is_409(client):
    assert client.get("/api/report").status_code == 409
    assert client.get("/api/report.pdf").status_code == 409


def test_full_wizard(submitted_client):
    data = submitted_client.get("/api/session").json()
    assert data["progress"] == 100
    assert data["notice"]["level"] == "success"
    assert data["assessment"]["score"] == 6
    assert data["assessment"]["tier"] == "low"
    assert data["assessment"]["label"] == "[Safe & Stable Level]"


def test_submitted_session_rejects_next_and_edits(submitted_client):
    assert submitted_client.post("/api/session/next").status_code == 409
    assert submitted_client.post("/api/session/fields", json={"address": "x"}).status_code == 409


def test_report_json(submitted_client):
    response = submitted_client.get("/api/report")
    assert response.status_code == 200
    names = [page["name"] for page in response.json()["pages"]]
    assert names == ["summary", "breeds", "multicat", "impact"]


def test_report_pdf_download(submitted_client):
    response = submitted_client.get("/api/report.pdf")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "CatSafetyAssessment_Flat_12A,_Harbour_View,_Tai_Koo_" in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_chinese_pdf_without_font_warns(submitted_client, no_report_font):
    submitted_client.post("/api/session/locale", json={"locale": "zh"})

    response = submitted_client.get("/api/report.pdf")

    assert response.status_code == 200
    body = response.json()
    assert body["exported"] is False
    assert body["notice"]["level"] == "warning"
    assert body["session"]["stage"] == "submitted"
    assert body["session"]["notice"]["level"] == "warning"
    assert submitted_client.get("/api/session").json()["notice"]["level"] == "warning"


def test_reset_starts_over(submitted_client):
    data = submitted_client.post("/api/session/reset").json()
    assert data["stage"] == "basic_info"
    assert data["assessment"] is None
    assert data["draft"]["address"] == ""


def test_dispatch_log_records_submission(submitted_client):
    entries = submitted_client.get("/api/dispatch-log").json()["entries"]
    assert len(entries) == 1
    assert entries[0]["mode"] == "DRY_RUN"
    assert entries[0]["risk_level"] == "穩定防護級別"


def test_config_endpoint(client):
    status = client.get("/api/config").json()
    assert status["webhook_mode"] == "DRY_RUN"
    assert status["default_locale"] == "zh"


def test_every_response_renews_cookie(client, monkeypatch, token_signed_ago):
    monkeypatch.setenv("SESSION_MAX_AGE", "60")
    first = client.get("/api/session")
    session_id = verify_session_token(first.cookies[SESSION_COOKIE_NAME])

    client.cookies.clear()
    client.cookies.set(SESSION_COOKIE_NAME, token_signed_ago(session_id, 50))
    response = client.post("/api/session/fields", json={"address": "Flat 1"})

    assert response.json()["draft"]["address"] == "Flat 1"
    assert verify_session_token(response.cookies[SESSION_COOKIE_NAME]) == session_id
    assert "Max-Age=60" in response.headers["set-cookie"]


def test_bad_field_value_leaves_draft_unchanged(client):
    response = client.post("/api/session/fields", json={"address": "Flat 1", "cat_count_score": "abc"})
    assert response.status_code == 422
    assert response.json()["session"]["draft"]["address"] == ""
