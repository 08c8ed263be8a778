"""
Intake wizard state machine for the CatGuard questionnaire.

Stage Flow:
BASIC_INFO -> SCORED_QUESTIONS -> CONFIRMATION -> SUBMITTED
Back steps one stage towards BASIC_INFO and never clears answers.
Reset returns any stage to BASIC_INFO with a fresh DraftRecord.

Guards:
- BASIC_INFO -> SCORED_QUESTIONS: address, building type, floor, window count
  and heaviest cat weight are non-empty after trimming.
- SCORED_QUESTIONS -> CONFIRMATION: every scored answer is one of its
  question's option values (so never the -1 sentinel, never 0 cats).
- CONFIRMATION -> SUBMITTED: both guards again, then score, post the webhook
  and move on whatever the post's outcome.

A failed guard leaves the stage unchanged and returns a Notice for the user.
"""
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from localization import DEFAULT_LOCALE, Locale, Translator
from models import (
    DraftRecord,
    BASIC_FIELDS,
    REQUIRED_BASIC_FIELDS,
    SCORED_FIELDS,
    SCORED_QUESTIONS,
    UNANSWERED,
)
from scoring import Assessment, ScoringConfig, DEFAULT_SCORING, assess
from webhook import DispatchResult, build_submission_payload, submit_payload


class IntakeStage(str, Enum):
    BASIC_INFO = "basic_info"
    SCORED_QUESTIONS = "scored_questions"
    CONFIRMATION = "confirmation"
    SUBMITTED = "submitted"


STAGE_ORDER = (
    IntakeStage.BASIC_INFO,
    IntakeStage.SCORED_QUESTIONS,
    IntakeStage.CONFIRMATION,
    IntakeStage.SUBMITTED,
)
WIZARD_STEPS = 3

NOTICE_ERROR = "error"
NOTICE_WARNING = "warning"
NOTICE_SUCCESS = "success"


class InvalidTransitionError(Exception):
    """Operation not allowed in the session's current stage."""


class FieldUpdateError(ValueError):
    """Unknown draft field, or a value that cannot be stored in it."""


@dataclass
class Notice:
    level: str  # error, warning, success
    title_key: str
    description_key: str

    def render(self, translator: Translator) -> Dict[str, str]:
        return {
            "level": self.level,
            "title": translator.t(self.title_key),
            "description": translator.t(self.description_key),
        }


NOTICE_FILL_ALL = Notice(NOTICE_ERROR, "notice.fill_all", "notice.fill_all_desc")
NOTICE_COMPLETE_ALL = Notice(NOTICE_ERROR, "notice.complete_all", "notice.complete_all_desc")
NOTICE_SUBMITTED = Notice(NOTICE_SUCCESS, "notice.success", "notice.success_desc")
NOTICE_SUBMIT_FAILED = Notice(NOTICE_WARNING, "notice.error", "notice.error_desc")
NOTICE_EXPORT_FAILED = Notice(NOTICE_WARNING, "notice.export_error", "notice.export_error_desc")


@dataclass
class StepResult:
    advanced: bool
    stage: IntakeStage
    notice: Optional[Notice] = None


Dispatcher = Callable[[Dict[str, Any]], DispatchResult]


def validate_basic_info(draft: DraftRecord) -> Tuple[bool, List[str]]:
    """
    Check the required basic fields.

    Returns:
        (is_valid, missing_fields)
    """
    missing = [name for name in REQUIRED_BASIC_FIELDS if not getattr(draft, name).strip()]
    return len(missing) == 0, missing


def validate_scored_answers(draft: DraftRecord) -> Tuple[bool, List[str]]:
    """
    Check every scored answer is one of its question's option values.

    Returns:
        (is_valid, invalid_fields)
    """
    invalid = [q.field for q in SCORED_QUESTIONS if not q.accepts(getattr(draft, q.field))]
    return len(invalid) == 0, invalid


def _coerce_score(name: str, value: Any) -> int:
    if value is None:
        return UNANSWERED
    if isinstance(value, bool):
        raise FieldUpdateError(f"{name} expects an integer answer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise FieldUpdateError(f"{name} expects an integer answer, got {value!r}")


def _coerce_text(name: str, value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise FieldUpdateError(f"{name} expects text, got {value!r}")
    return str(value)


class IntakeSession:
    """
    One visitor's questionnaire: the draft, the active locale, the wizard
    stage and the result of the last submission.

    Passed explicitly to the report composer and the exporter. Mutating
    methods hold the session lock so overlapping requests for the same
    session apply one at a time.
    """

    def __init__(
        self,
        locale: Locale = DEFAULT_LOCALE,
        scoring: ScoringConfig = DEFAULT_SCORING,
        session_id: Optional[str] = None
    ):
        self.session_id = session_id or secrets.token_urlsafe(16)
        self.locale = Locale(locale)
        self.scoring = scoring
        self.draft = DraftRecord()
        self.stage = IntakeStage.BASIC_INFO
        self.assessment: Optional[Assessment] = None
        self.last_dispatch: Optional[DispatchResult] = None
        self.notice: Optional[Notice] = None
        self.created_at = datetime.utcnow()
        self.updated_at = self.created_at
        self._lock = threading.RLock()

    @property
    def translator(self) -> Translator:
        return Translator(self.locale)

    def touch(self) -> None:
        """Mark the session active now; idle expiry counts from here."""
        self.updated_at = datetime.utcnow()

    def _log(self, message: str) -> None:
        print(f"[INTAKE] Session {self.session_id[:8]}: {message}")

    def set_locale(self, locale: Locale) -> None:
        """Switch display language; answers and payload keys are untouched."""
        with self._lock:
            self.locale = Locale(locale)
            self.touch()

    def update_field(self, name: str, value: Any) -> None:
        self.update_fields({name: value})

    def update_fields(self, values: Dict[str, Any]) -> None:
        """
        Apply several updates at once.

        Every name and value is checked before the draft is touched, so a
        FieldUpdateError leaves the draft exactly as it was.
        """
        with self._lock:
            if self.stage == IntakeStage.SUBMITTED:
                raise InvalidTransitionError("Answers are locked after submission; reset to start again")
            unknown = [name for name in values if name not in SCORED_FIELDS and name not in BASIC_FIELDS]
            if unknown:
                raise FieldUpdateError(f"Unknown field(s): {', '.join(sorted(unknown))}")

            coerced = {
                name: _coerce_score(name, value) if name in SCORED_FIELDS else _coerce_text(name, value)
                for name, value in values.items()
            }
            for name, value in coerced.items():
                setattr(self.draft, name, value)
            self.touch()

    def set_notice(self, notice: Optional[Notice]) -> None:
        with self._lock:
            self.notice = notice
            self.touch()

    def next(self) -> StepResult:
        with self._lock:
            if self.stage == IntakeStage.BASIC_INFO:
                is_valid, missing = validate_basic_info(self.draft)
                if not is_valid:
                    self._log(f"basic info incomplete: {', '.join(missing)}")
                    return self._blocked(NOTICE_FILL_ALL)
                return self._advance(IntakeStage.SCORED_QUESTIONS)

            if self.stage == IntakeStage.SCORED_QUESTIONS:
                is_valid, invalid = validate_scored_answers(self.draft)
                if not is_valid:
                    self._log(f"scored answers incomplete: {', '.join(invalid)}")
                    return self._blocked(NOTICE_COMPLETE_ALL)
                return self._advance(IntakeStage.CONFIRMATION)

            raise InvalidTransitionError(f"Cannot advance from {self.stage.value}; use submit or reset")

    def back(self) -> StepResult:
        with self._lock:
            if self.stage == IntakeStage.BASIC_INFO:
                raise InvalidTransitionError("Already at the first stage")
            if self.stage == IntakeStage.SUBMITTED:
                self.assessment = None
                self.last_dispatch = None
            previous = STAGE_ORDER[STAGE_ORDER.index(self.stage) - 1]
            return self._advance(previous)

    def submit(self, dispatcher: Dispatcher = submit_payload, now: Optional[datetime] = None) -> StepResult:
        """
        Score the finished draft, post it once and move to SUBMITTED.

        The dispatcher's outcome only decides which notice is shown; a failed
        post never blocks the report, which is computed locally.
        """
        with self._lock:
            if self.stage != IntakeStage.CONFIRMATION:
                raise InvalidTransitionError(f"Submit is only allowed from confirmation, not {self.stage.value}")

            if not validate_basic_info(self.draft)[0]:
                return self._blocked(NOTICE_FILL_ALL)
            if not validate_scored_answers(self.draft)[0]:
                return self._blocked(NOTICE_COMPLETE_ALL)

            assessment = assess(self.draft, self.scoring)
            payload = build_submission_payload(self.draft, assessment, now=now)

            try:
                result = dispatcher(payload)
            except Exception as e:
                print(f"[INTAKE][DISPATCH_ERROR] Session {self.session_id[:8]}: {e}")
                result = DispatchResult(success=False, mode="UNKNOWN", result="failed", error=str(e))

            self.assessment = assessment
            self.last_dispatch = result
            step = self._advance(IntakeStage.SUBMITTED)
            step.notice = NOTICE_SUBMITTED if result.success else NOTICE_SUBMIT_FAILED
            self.notice = step.notice
            self._log(f"submitted score={assessment.score} tier={assessment.tier.value} "
                      f"dispatch={result.result}")
            return step

    def reset(self) -> None:
        with self._lock:
            self.draft = DraftRecord()
            self.stage = IntakeStage.BASIC_INFO
            self.assessment = None
            self.last_dispatch = None
            self.notice = None
            self.touch()
            self._log("reset")

    def progress_percent(self) -> int:
        index = min(STAGE_ORDER.index(self.stage), WIZARD_STEPS)
        return round(index / WIZARD_STEPS * 100)

    def _advance(self, stage: IntakeStage) -> StepResult:
        self.stage = stage
        self.notice = None
        self.touch()
        self._log(f"moved to {stage.value}")
        return StepResult(advanced=True, stage=stage)

    def _blocked(self, notice: Notice) -> StepResult:
        self.notice = notice
        self.touch()
        return StepResult(advanced=False, stage=self.stage, notice=notice)

    def to_dict(self) -> Dict[str, Any]:
        """Session state for API responses, with text in the active locale."""
        translator = self.translator
        data: Dict[str, Any] = {
            "stage": self.stage.value,
            "step": min(STAGE_ORDER.index(self.stage) + 1, WIZARD_STEPS),
            "total_steps": WIZARD_STEPS,
            "progress": self.progress_percent(),
            "locale": self.locale.value,
            "draft": self.draft.model_dump(),
            "notice": self.notice.render(translator) if self.notice else None,
            "assessment": None,
        }
        if self.assessment is not None:
            profile = self.assessment.profile
            data["assessment"] = {
                "score": self.assessment.score,
                "max_score": self.assessment.max_score,
                "tier": self.assessment.tier.value,
                "label": translator.t(profile.label_key),
                "color": profile.color_token,
                "dispatch": self.last_dispatch.result if self.last_dispatch else None,
            }
        return data
