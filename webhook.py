"""
Submission webhook for the CatGuard intake questionnaire.
Supports two modes: DRY_RUN, LIVE

Each finished questionnaire is posted once, as a flat JSON record, to the
lead sheet's webhook. The post is best-effort: the response is never read,
there is no retry, and any local transport exception is caught, logged and
returned as a failed DispatchResult. It is never raised to the caller.

Environment Variables:
  WEBHOOK_MODE = DRY_RUN | LIVE (defaults to DRY_RUN)
  WEBHOOK_URL            - Endpoint for LIVE mode (required for LIVE)
  WEBHOOK_TIMEOUT        - Optional timeout in seconds (default: none)
  WEBHOOK_LABEL_LOCALE   - Locale of the riskLevel label (default: zh)
"""
import os
from collections import deque
from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any, Tuple

import requests

from localization import Locale, parse_locale, translate
from models import DraftRecord, SCORED_QUESTIONS
from scoring import Assessment


class WebhookMode(str, Enum):
    DRY_RUN = "DRY_RUN"
    LIVE = "LIVE"


@dataclass
class DispatchResult:
    """Outcome of one submission post."""
    success: bool
    mode: str  # "DRY_RUN", "LIVE"
    result: str  # "dispatched", "dry_run", "failed"
    error: Optional[str] = None


@dataclass
class DispatchAttempt:
    timestamp: str
    address: str
    total_score: int
    risk_level: str
    mode: str
    result: str
    error: Optional[str] = None


MAX_LOG_ENTRIES = 200  # In-memory only, oldest entries drop off
_DISPATCH_LOG: deque = deque(maxlen=MAX_LOG_ENTRIES)

TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M:%S"  # Hong Kong day-first style


def get_webhook_mode() -> WebhookMode:
    """
    Get the configured webhook mode from environment.
    Falls back to DRY_RUN if WEBHOOK_MODE is not set or invalid.
    """
    mode_str = os.getenv("WEBHOOK_MODE", "DRY_RUN").upper().strip()
    try:
        return WebhookMode(mode_str)
    except ValueError:
        print(f"[WEBHOOK] Warning: Invalid WEBHOOK_MODE '{mode_str}', falling back to DRY_RUN")
        return WebhookMode.DRY_RUN


def get_webhook_url() -> str:
    return os.getenv("WEBHOOK_URL", "").strip()


def get_webhook_timeout() -> Optional[float]:
    """Timeout for the post in seconds, or None to wait indefinitely."""
    raw = os.getenv("WEBHOOK_TIMEOUT", "").strip()
    if not raw:
        return None
    try:
        timeout = float(raw)
    except ValueError:
        print(f"[WEBHOOK] Warning: Invalid WEBHOOK_TIMEOUT '{raw}', posting without a timeout")
        return None
    return timeout if timeout > 0 else None


def get_label_locale() -> Locale:
    raw = os.getenv("WEBHOOK_LABEL_LOCALE", Locale.ZH.value)
    try:
        return parse_locale(raw)
    except ValueError:
        print(f"[WEBHOOK] Warning: Invalid WEBHOOK_LABEL_LOCALE '{raw}', using zh")
        return Locale.ZH


def validate_webhook_config() -> Tuple[WebhookMode, bool, str]:
    """
    Validate webhook configuration for the selected mode.

    Returns:
        (effective_mode, is_valid, message)
        LIVE without WEBHOOK_URL returns DRY_RUN with an error message.
    """
    mode = get_webhook_mode()

    if mode == WebhookMode.DRY_RUN:
        return mode, True, "DRY_RUN mode - submissions are logged, not posted"

    url = get_webhook_url()
    if not url:
        error_msg = "LIVE mode requires WEBHOOK_URL"
        print(f"[WEBHOOK][ERROR] {error_msg}")
        return WebhookMode.DRY_RUN, False, error_msg

    return mode, True, f"LIVE mode posting to {url}"


def format_timestamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime(TIMESTAMP_FORMAT)


def build_submission_payload(
    draft: DraftRecord,
    assessment: Assessment,
    now: Optional[datetime] = None,
    label_locale: Optional[Locale] = None
) -> Dict[str, Any]:
    """
    Flatten a finished draft into the webhook record.

    Keys and units never depend on the UI locale; riskLevel is written in
    label_locale (WEBHOOK_LABEL_LOCALE when not given).
    """
    label_locale = label_locale or get_label_locale()

    payload: Dict[str, Any] = {
        "timestamp": format_timestamp(now),
        "address": draft.address,
        "floor": draft.floor_level,
        "buildingType": draft.building_type,
        "windowCount": draft.window_count,
        "doorCount": draft.door_count or "0",
        "heaviestCatWeight": draft.heaviest_cat_weight,
    }
    for question in SCORED_QUESTIONS:
        payload[question.payload_key] = getattr(draft, question.field)
    payload["totalScore"] = assessment.score
    payload["riskLevel"] = translate(label_locale, assessment.profile.webhook_label_key)
    return payload


def _log_attempt(payload: Dict[str, Any], result: DispatchResult) -> None:
    _DISPATCH_LOG.append(asdict(DispatchAttempt(
        timestamp=datetime.utcnow().isoformat(),
        address=str(payload.get("address", "")),
        total_score=int(payload.get("totalScore", 0)),
        risk_level=str(payload.get("riskLevel", "")),
        mode=result.mode,
        result=result.result,
        error=result.error
    )))


def get_dispatch_log(limit: int = 10) -> List[Dict[str, Any]]:
    """Get the last N submission attempts for operator display."""
    entries = list(_DISPATCH_LOG)
    return entries[-limit:] if limit > 0 else []


def send_payload_dry_run(payload: Dict[str, Any]) -> DispatchResult:
    """Log the submission instead of posting it."""
    print(f"\n{'='*60}")
    print("[WEBHOOK][DRY_RUN] Simulated Submission")
    print(f"{'='*60}")
    for key, value in payload.items():
        print(f"  {key}: {value}")
    print(f"{'='*60}\n")

    return DispatchResult(success=True, mode="DRY_RUN", result="dry_run")


def send_payload_live(payload: Dict[str, Any], url: str) -> DispatchResult:
    """
    Post the submission once as JSON.

    The response status and body are deliberately ignored: the call counts as
    dispatched as soon as requests returns without raising.
    """
    try:
        print(f"[WEBHOOK][LIVE] Posting submission (score={payload.get('totalScore')}, "
              f"level={payload.get('riskLevel')})")
        requests.post(
            url,
            headers={"Content-Type": "application/json"},
            json=payload,
            timeout=get_webhook_timeout()
        )
        print("[WEBHOOK][SUCCESS][LIVE] Submission dispatched")
        return DispatchResult(success=True, mode="LIVE", result="dispatched")
    except Exception as e:
        error_msg = str(e) or e.__class__.__name__
        print(f"[WEBHOOK][FAIL][LIVE] Exception: {error_msg}")
        return DispatchResult(success=False, mode="LIVE", result="failed", error=error_msg)


def submit_payload(payload: Dict[str, Any]) -> DispatchResult:
    """
    Main entry point: dispatch one submission in the configured mode.

    Always returns a DispatchResult; failures are reported, never raised.
    """
    mode, _, _ = validate_webhook_config()

    if mode == WebhookMode.LIVE:
        result = send_payload_live(payload, get_webhook_url())
    else:
        result = send_payload_dry_run(payload)

    _log_attempt(payload, result)
    return result
