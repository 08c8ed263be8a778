"""
Scoring engine for the CatGuard intake questionnaire.

score(draft) is the plain sum of the six scored answers. classify(score) maps
that sum onto three tiers with two ascending cut points:

    score <= low_max                 -> LOW
    low_max < score <= medium_max    -> MEDIUM
    score > medium_max               -> HIGH

One configuration is used everywhere (tiering, the report's "x / max"
denominator): cut points 6 and 13, maximum 19 (cat count 1-4 plus five
questions at 0-3).
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

from models import DraftRecord, ScoredQuestion, SCORED_QUESTIONS


class RiskTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


TIER_ORDER = (RiskTier.LOW, RiskTier.MEDIUM, RiskTier.HIGH)


@dataclass(frozen=True)
class ScoringConfig:
    low_max: int = 6
    medium_max: int = 13
    max_score: int = sum(q.max_value for q in SCORED_QUESTIONS)

    def __post_init__(self):
        if not self.low_max < self.medium_max < self.max_score:
            raise ValueError(
                f"Cut points must ascend below the maximum: "
                f"{self.low_max} < {self.medium_max} < {self.max_score}"
            )


DEFAULT_SCORING = ScoringConfig()


@dataclass(frozen=True)
class RiskProfile:
    """Display attributes of a tier; text is referenced by localization key."""
    tier: RiskTier
    label_key: str
    webhook_label_key: str
    color_token: str
    color_rgb: Tuple[int, int, int]
    assessment_key: str
    recommendation_key: str
    advice_key: str


def _profile(tier: RiskTier, rgb: Tuple[int, int, int]) -> RiskProfile:
    return RiskProfile(
        tier=tier,
        label_key=f"report.tier.{tier.value}",
        webhook_label_key=f"webhook.tier.{tier.value}",
        color_token=f"risk-{tier.value}",
        color_rgb=rgb,
        assessment_key=f"risk.{tier.value}.assessment",
        recommendation_key=f"risk.{tier.value}.recommendation",
        advice_key=f"risk.{tier.value}.advice",
    )


RISK_PROFILES: Dict[RiskTier, RiskProfile] = {
    RiskTier.LOW: _profile(RiskTier.LOW, (34, 197, 94)),
    RiskTier.MEDIUM: _profile(RiskTier.MEDIUM, (245, 158, 11)),
    RiskTier.HIGH: _profile(RiskTier.HIGH, (220, 38, 38)),
}


@dataclass(frozen=True)
class Assessment:
    score: int
    tier: RiskTier
    max_score: int

    @property
    def profile(self) -> RiskProfile:
        return RISK_PROFILES[self.tier]


def score(draft: DraftRecord) -> int:
    """Sum of the six scored answers. Does not validate the answers."""
    return sum(draft.scores().values())


def classify(total: int, config: ScoringConfig = DEFAULT_SCORING) -> RiskTier:
    if total <= config.low_max:
        return RiskTier.LOW
    if total <= config.medium_max:
        return RiskTier.MEDIUM
    return RiskTier.HIGH


def assess(draft: DraftRecord, config: ScoringConfig = DEFAULT_SCORING) -> Assessment:
    total = score(draft)
    return Assessment(score=total, tier=classify(total, config), max_score=config.max_score)


def is_flagged(question: ScoredQuestion, value: int) -> bool:
    """True when the answer should be highlighted in the report's score table."""
    return value >= question.flag_threshold
