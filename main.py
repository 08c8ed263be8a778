"""
CatGuard Intake: cat-safety window-netting questionnaire
FastAPI backend for the three-step intake wizard, report and PDF export.

Routes:
- /health                 → Liveness check
- /api/questions          → Scored-question catalogue in the session locale (GET)
- /api/session            → Current stage, progress, draft, notice, assessment (GET)
- /api/session/fields     → Update draft fields from a JSON object (POST)
- /api/session/next       → Forward step, guarded (POST)
- /api/session/back       → Backward step, answers kept (POST)
- /api/session/submit     → Score, post the webhook, move to submitted (POST)
- /api/session/reset      → Start again with an empty draft (POST)
- /api/session/locale     → Switch display language (POST)
- /api/report             → Composed report pages as JSON, after submit (GET)
- /api/report.pdf         → PDF download, after submit (GET)
- /api/dispatch-log       → Recent webhook attempts (GET)
- /api/config             → Effective configuration with warnings (GET)

Status codes:
- 200 for guard failures too: the body carries the unchanged stage and a notice
- 409 when an operation is not allowed in the current stage
- 422 for unknown fields, unusable values and unknown locales
"""
from datetime import date
from typing import Any, Dict
from urllib.parse import quote

from fastapi import FastAPI, Body, Query, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config import get_config_status, get_session_max_age, print_startup_banners
from intake import (
    IntakeSession,
    IntakeStage,
    InvalidTransitionError,
    FieldUpdateError,
    StepResult,
    NOTICE_EXPORT_FAILED,
)
from localization import parse_locale
from models import BUILDING_TYPES, SCORED_QUESTIONS
from pdf_export import ExportError, assemble, build_export_filename
from report import compose_report
from session_utils import SESSION_COOKIE_NAME, create_session_token, get_or_create_session
from webhook import get_dispatch_log

app = FastAPI(title="CatGuard Intake")


class LocaleRequest(BaseModel):
    locale: str


# ============================================================================
# STARTUP
# ============================================================================


@app.on_event("startup")
async def startup_event():
    """Print the effective configuration."""
    print_startup_banners()
    print("[STARTUP] CatGuard intake initialized.")


# ============================================================================
# SESSION HELPERS
# ============================================================================


def _resolve_session(request: Request):
    return get_or_create_session(request.cookies.get(SESSION_COOKIE_NAME))


def _attach_cookie(response: Response, session: IntakeSession, is_new: bool) -> Response:
    """Re-sign the cookie on every response so its lifetime counts from the last request."""
    if is_new:
        print(f"[SESSION] Issuing cookie for {session.session_id[:8]}")
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=create_session_token(session.session_id),
        max_age=get_session_max_age(),
        httponly=True,
        samesite="lax"
    )
    return response


def _json(content: Dict[str, Any], session: IntakeSession, is_new: bool, status_code: int = 200) -> JSONResponse:
    return _attach_cookie(JSONResponse(content=content, status_code=status_code), session, is_new)


def _error(detail: str, session: IntakeSession, is_new: bool, status_code: int) -> JSONResponse:
    print(f"[API][{status_code}] {detail}")
    return _json({"detail": detail, "session": session.to_dict()}, session, is_new, status_code)


def _step_response(step: StepResult, session: IntakeSession, is_new: bool) -> JSONResponse:
    return _json({"advanced": step.advanced, "session": session.to_dict()}, session, is_new)


def _content_disposition(filename: str) -> str:
    try:
        filename.encode("ascii")
        fallback = filename
    except UnicodeEncodeError:
        fallback = build_export_filename("")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


# ============================================================================
# API ROUTES
# ============================================================================


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/api/questions")
def get_questions(request: Request):
    """Scored-question catalogue with option labels in the session locale."""
    session, is_new = _resolve_session(request)
    t = session.translator
    questions = [
        {
            "id": q.id,
            "field": q.field,
            "title": t.t(q.title_key),
            "options": [{"value": o.value, "label": t.t(o.label_key)} for o in q.options],
        }
        for q in SCORED_QUESTIONS
    ]
    building_types = [
        {"value": value, "label": t.t(f"field.building_type.{value.lower()}")}
        for value in BUILDING_TYPES
    ]
    return _json({
        "locale": session.locale.value,
        "building_types": building_types,
        "questions": questions,
    }, session, is_new)


@app.get("/api/session")
def get_session_state(request: Request):
    session, is_new = _resolve_session(request)
    return _json(session.to_dict(), session, is_new)


@app.post("/api/session/fields")
def update_fields(request: Request, values: Dict[str, Any] = Body(...)):
    """Apply draft updates; an unknown name or a bad value rejects the whole request."""
    session, is_new = _resolve_session(request)
    try:
        session.update_fields(values)
    except InvalidTransitionError as e:
        return _error(str(e), session, is_new, 409)
    except FieldUpdateError as e:
        return _error(str(e), session, is_new, 422)
    return _json(session.to_dict(), session, is_new)


@app.post("/api/session/next")
def next_step(request: Request):
    session, is_new = _resolve_session(request)
    try:
        step = session.next()
    except InvalidTransitionError as e:
        return _error(str(e), session, is_new, 409)
    return _step_response(step, session, is_new)


@app.post("/api/session/back")
def back_step(request: Request):
    session, is_new = _resolve_session(request)
    try:
        step = session.back()
    except InvalidTransitionError as e:
        return _error(str(e), session, is_new, 409)
    return _step_response(step, session, is_new)


@app.post("/api/session/submit")
def submit(request: Request):
    """Final submit. A failed webhook post still reaches the submitted stage."""
    session, is_new = _resolve_session(request)
    try:
        step = session.submit()
    except InvalidTransitionError as e:
        return _error(str(e), session, is_new, 409)
    return _step_response(step, session, is_new)


@app.post("/api/session/reset")
def reset(request: Request):
    session, is_new = _resolve_session(request)
    session.reset()
    return _json(session.to_dict(), session, is_new)


@app.post("/api/session/locale")
def set_locale(request: Request, body: LocaleRequest):
    session, is_new = _resolve_session(request)
    try:
        locale = parse_locale(body.locale)
    except ValueError:
        return _error(f"Unsupported locale: {body.locale}", session, is_new, 422)
    session.set_locale(locale)
    return _json(session.to_dict(), session, is_new)


@app.get("/api/report")
def get_report(request: Request):
    session, is_new = _resolve_session(request)
    if session.stage != IntakeStage.SUBMITTED or session.assessment is None:
        return _error("Report is available after submission", session, is_new, 409)
    pages = compose_report(session.draft, session.assessment, session.translator)
    return _json({"pages": [page.to_dict() for page in pages]}, session, is_new)


@app.get("/api/report.pdf")
def get_report_pdf(request: Request):
    """
    Download the report as PDF.

    Export failures answer 200 with a warning notice instead of a document;
    the session stays on the report.
    """
    session, is_new = _resolve_session(request)
    if session.stage != IntakeStage.SUBMITTED or session.assessment is None:
        return _error("Report is available after submission", session, is_new, 409)

    translator = session.translator
    pages = compose_report(session.draft, session.assessment, translator)
    try:
        document = assemble(pages, translator=translator)
    except ExportError as e:
        print(f"[API][EXPORT_FAILED] Session {session.session_id[:8]}: {e}")
        session.set_notice(NOTICE_EXPORT_FAILED)
        return _json({
            "exported": False,
            "notice": NOTICE_EXPORT_FAILED.render(translator),
            "session": session.to_dict(),
        }, session, is_new)

    filename = build_export_filename(session.draft.address, date.today())
    response = Response(
        content=document,
        media_type="application/pdf",
        headers={"Content-Disposition": _content_disposition(filename)}
    )
    return _attach_cookie(response, session, is_new)


@app.get("/api/dispatch-log")
def get_dispatch_log_endpoint(limit: int = Query(default=10, le=50)):
    """Get recent webhook submission attempts."""
    return {"entries": get_dispatch_log(limit)}


@app.get("/api/config")
def get_config_endpoint():
    return get_config_status()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=5000)
