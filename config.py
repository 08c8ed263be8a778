"""
Runtime Configuration for the CatGuard intake service.

Every value is read from the environment on each call, so tests and operators
can change behavior without restarting.

Environment Variables:
    DEFAULT_LOCALE    = zh | en (default: zh)
    REPORT_FONT_PATH  - Unicode TTF used for PDF export; when unset a CJK font is
                        looked up in assets/fonts and common system locations
    SESSION_SECRET    - Secret for signing the session cookie (generated if unset)
    SESSION_MAX_AGE   - Idle session lifetime in seconds (default: 14400, 4 hours)
    MAX_SESSIONS      - In-memory session cap; oldest sessions are evicted (default: 1000)

Webhook Configuration (see webhook.py):
    WEBHOOK_MODE = DRY_RUN | LIVE
    WEBHOOK_URL, WEBHOOK_TIMEOUT, WEBHOOK_LABEL_LOCALE
"""
import os
from typing import Any, Dict, List, Optional

from localization import DEFAULT_LOCALE, Locale, parse_locale
from webhook import get_label_locale, get_webhook_timeout, validate_webhook_config


DEFAULT_SESSION_MAX_AGE = 60 * 60 * 4
DEFAULT_MAX_SESSIONS = 1000

# Single-face TrueType files only
BUNDLED_FONT_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "assets", "fonts")
BUNDLED_FONT_NAMES = ("NotoSansTC-Regular.ttf", "NotoSansSC-Regular.ttf", "DroidSansFallbackFull.ttf")
SYSTEM_FONT_PATHS = (
    "/usr/share/fonts/truetype/droid/DroidSansFallbackFull.ttf",
    "/usr/share/fonts/google-droid-sans-fonts/DroidSansFallbackFull.ttf",
    "/usr/share/fonts/truetype/noto/NotoSansTC-Regular.ttf",
    "/usr/share/fonts/truetype/noto/NotoSansSC-Regular.ttf",
    "/usr/share/fonts/truetype/arphic-bkai00mp/bkai00mp.ttf",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    "/Library/Fonts/Arial Unicode.ttf",
    "C:/Windows/Fonts/simhei.ttf",
)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        print(f"[CONFIG] Warning: Invalid {name} '{raw}', using {default}")
        return default
    if value <= 0:
        print(f"[CONFIG] Warning: {name} must be positive, using {default}")
        return default
    return value


def get_default_locale() -> Locale:
    """Locale for new sessions. Falls back to zh on unknown codes."""
    raw = os.getenv("DEFAULT_LOCALE", "")
    if not raw.strip():
        return DEFAULT_LOCALE
    try:
        return parse_locale(raw)
    except ValueError:
        print(f"[CONFIG] Warning: Invalid DEFAULT_LOCALE '{raw}', using {DEFAULT_LOCALE.value}")
        return DEFAULT_LOCALE


def get_report_font_path() -> Optional[str]:
    """REPORT_FONT_PATH when set, otherwise the first CJK font found on disk."""
    path = os.getenv("REPORT_FONT_PATH", "").strip()
    return path or discover_report_font()


def _font_candidates() -> List[str]:
    bundled = [os.path.join(BUNDLED_FONT_DIR, name) for name in BUNDLED_FONT_NAMES]
    return bundled + list(SYSTEM_FONT_PATHS)


def discover_report_font() -> Optional[str]:
    """First existing font from assets/fonts, then the usual system locations."""
    for path in _font_candidates():
        if os.path.isfile(path):
            return path
    return None


def get_session_max_age() -> int:
    return _int_env("SESSION_MAX_AGE", DEFAULT_SESSION_MAX_AGE)


def get_max_sessions() -> int:
    return _int_env("MAX_SESSIONS", DEFAULT_MAX_SESSIONS)


def get_config_status() -> Dict[str, Any]:
    """
    Get current configuration for operator display.

    Returns effective values plus any warnings/errors found.
    """
    webhook_mode, webhook_valid, webhook_message = validate_webhook_config()
    font_path = get_report_font_path()
    font_found = bool(font_path and os.path.isfile(font_path))
    font_from_env = bool(os.getenv("REPORT_FONT_PATH", "").strip())

    warnings = []
    errors = []

    if not webhook_valid:
        errors.append(f"{webhook_message} - falling back to DRY_RUN")
    if not font_path:
        warnings.append("REPORT_FONT_PATH not set and no CJK font found - Chinese reports cannot be exported to PDF")
    elif not font_found:
        errors.append(f"REPORT_FONT_PATH does not exist: {font_path}")
    if not os.getenv("SESSION_SECRET"):
        warnings.append("SESSION_SECRET not set - sessions will not survive a restart")

    return {
        "default_locale": get_default_locale().value,
        "webhook_mode": webhook_mode.value,
        "webhook_message": webhook_message,
        "webhook_timeout": get_webhook_timeout(),
        "webhook_label_locale": get_label_locale().value,
        "report_font_path": font_path,
        "report_font_found": font_found,
        "report_font_source": ("env" if font_from_env else "discovered") if font_path else None,
        "session_max_age": get_session_max_age(),
        "max_sessions": get_max_sessions(),
        "warnings": warnings,
        "errors": errors
    }


def print_startup_banners() -> None:
    """Print startup status banners for all subsystems."""
    status = get_config_status()

    print("=" * 60)
    print(f"[STARTUP] CatGuard intake service (default locale: {status['default_locale']})")
    print("=" * 60)

    if status["webhook_mode"] == "LIVE":
        timeout = status["webhook_timeout"]
        print(f"[WEBHOOK][STARTUP] {status['webhook_message']} "
              f"(timeout: {timeout if timeout else 'none'}, label locale: {status['webhook_label_locale']})")
    else:
        print(f"[WEBHOOK][STARTUP] {status['webhook_message']}")

    if status["report_font_found"]:
        print(f"[PDF][STARTUP] Report font ({status['report_font_source']}): {status['report_font_path']}")
    else:
        print("[PDF][STARTUP] Core fonts only - English reports export, Chinese reports will not")

    print(f"[CONFIG] Sessions: max {status['max_sessions']}, idle lifetime {status['session_max_age']}s")

    for warning in status["warnings"]:
        print(f"[CONFIG][WARNING] {warning}")
    for error in status["errors"]:
        print(f"[CONFIG][ERROR] {error}")
