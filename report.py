"""
Report composer for the CatGuard intake questionnaire.

compose_report() turns a submitted draft and its assessment into an ordered
list of ReportPage objects:

    1. summary   - title, tier banner, narrative, basic info, score breakdown
    2. breeds    - breed risk categories (static)
    3. multicat  - multi-cat household behavior (static)
    4. impact    - physical impact reference table (static)

Pages 2-4 depend only on the locale and are built once per locale. Page count
never depends on the locale. Every page is sized for a single A4 sheet; long
user-entered values are shortened so page height stays predictable.
"""
from dataclasses import dataclass, asdict
from datetime import date
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple

from localization import Locale, Translator
from models import DraftRecord, SCORED_QUESTIONS, BUILDING_TYPE_APARTMENT, BUILDING_TYPE_HOUSE
from scoring import Assessment, is_flagged


MAX_VALUE_CHARS = 60
MEDIAN_CAT_WEIGHT_KG = 4.5

# behavior key -> (low multiplier, high multiplier) of body weight
IMPACT_MULTIPLIERS = (
    ("static", 1, 1),
    ("climb", 3, 5),
    ("rush", 8, 12),
    ("scratch", 2, 3),
)

BREED_GROUPS = ("high", "medium", "low", "mixed")
HOUSEHOLD_SIZES = ("single", "double", "multiple")

_BUILDING_TYPE_KEYS = {
    BUILDING_TYPE_APARTMENT: "field.building_type.apartment",
    BUILDING_TYPE_HOUSE: "field.building_type.house",
}


@dataclass(frozen=True)
class Heading:
    text: str
    subtitle: Optional[str] = None
    kind: str = "heading"


@dataclass(frozen=True)
class Banner:
    label: str
    color_token: str
    color_rgb: Tuple[int, int, int]
    score: int
    max_score: int
    unit: str
    kind: str = "banner"


@dataclass(frozen=True)
class Paragraph:
    text: str
    title: Optional[str] = None
    kind: str = "paragraph"


@dataclass(frozen=True)
class KeyValueTable:
    title: str
    rows: Tuple[Tuple[str, str], ...]
    kind: str = "key_value_table"


@dataclass(frozen=True)
class ScoreRow:
    label: str
    value: int
    display: str
    flagged: bool


@dataclass(frozen=True)
class ScoreTable:
    title: str
    rows: Tuple[ScoreRow, ...]
    total_label: str
    total_display: str
    kind: str = "score_table"


@dataclass(frozen=True)
class GridTable:
    headers: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]
    kind: str = "grid_table"


@dataclass(frozen=True)
class Note:
    text: str
    kind: str = "note"


@dataclass(frozen=True)
class ReportPage:
    """One self-contained page handed to the exporter."""
    name: str
    title: str
    blocks: Tuple[Any, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "blocks": [asdict(block) for block in self.blocks],
        }


def _shorten(value: str, limit: int = MAX_VALUE_CHARS) -> str:
    value = " ".join(value.split())
    if len(value) <= limit:
        return value
    return value[:limit - 3].rstrip() + "..."


def _building_type_text(building_type: str, t: Translator) -> str:
    key = _BUILDING_TYPE_KEYS.get(building_type)
    return t.t(key) if key else building_type


def build_summary_page(
    draft: DraftRecord,
    assessment: Assessment,
    t: Translator,
    assessed_on: date
) -> ReportPage:
    profile = assessment.profile
    points = t.t("unit.points")
    pieces = t.t("unit.pieces")

    basic_rows = (
        (t.t("field.address"), _shorten(draft.address)),
        (t.t("field.building_type"), _shorten(_building_type_text(draft.building_type, t))),
        (t.t("field.floor_level"), _shorten(draft.floor_level)),
        (t.t("field.window_count"), f"{_shorten(draft.window_count)} {pieces}"),
        (t.t("field.door_count"), f"{_shorten(draft.door_count or '0')} {pieces}"),
        (t.t("field.heaviest_cat_weight"), f"{_shorten(draft.heaviest_cat_weight)} {t.t('unit.kg')}"),
    )

    score_rows = []
    for question in SCORED_QUESTIONS:
        value = getattr(draft, question.field)
        score_rows.append(ScoreRow(
            label=t.t(question.score_label_key),
            value=value,
            display=f"{value} {points}",
            flagged=is_flagged(question, value),
        ))

    title = t.t("report.title")
    blocks = (
        Heading(title, subtitle=f"{t.t('report.date')} {assessed_on.strftime('%d/%m/%Y')}"),
        Banner(
            label=t.t(profile.label_key),
            color_token=profile.color_token,
            color_rgb=profile.color_rgb,
            score=assessment.score,
            max_score=assessment.max_score,
            unit=points,
        ),
        Paragraph(t.t(profile.assessment_key), title=t.t("report.assessment")),
        Paragraph(t.t(profile.recommendation_key), title=t.t("report.recommendation")),
        Paragraph(t.t(profile.advice_key), title=t.t("report.advice")),
        KeyValueTable(t.t("report.basic_info"), basic_rows),
        ScoreTable(
            title=t.t("report.score_breakdown"),
            rows=tuple(score_rows),
            total_label=t.t("score.total"),
            total_display=f"{assessment.score} / {assessment.max_score} {points}",
        ),
        Paragraph(t.t("report.thanks_desc"), title=t.t("report.thanks")),
    )
    return ReportPage("summary", title, blocks)


def build_breeds_page(t: Translator) -> ReportPage:
    title = t.t("ref.breeds.title")
    rows = tuple(
        (t.t(f"ref.breeds.{group}"), t.t(f"ref.breeds.{group}.list"), t.t(f"ref.breeds.{group}.traits"))
        for group in BREED_GROUPS
    )
    blocks = (
        Heading(title, subtitle=t.t("ref.breeds.desc")),
        GridTable(
            headers=(t.t("ref.breeds.header.group"), t.t("ref.breeds.header.breeds"),
                     t.t("ref.breeds.header.traits")),
            rows=rows,
        ),
        Note(t.t("ref.breeds.note")),
    )
    return ReportPage("breeds", title, blocks)


def build_multicat_page(t: Translator) -> ReportPage:
    title = t.t("ref.multicat.title")
    paragraphs = tuple(
        Paragraph(t.t(f"ref.multicat.{size}.desc"), title=t.t(f"ref.multicat.{size}"))
        for size in HOUSEHOLD_SIZES
    )
    blocks = (Heading(title, subtitle=t.t("ref.multicat.desc")),) + paragraphs + (
        Note(t.t("ref.multicat.note")),
    )
    return ReportPage("multicat", title, blocks)


def _format_kg(value: float) -> str:
    return f"{value:g} kg"


def _impact_row(behavior: str, low: int, high: int, t: Translator) -> Tuple[str, ...]:
    if low == high:
        multiplier = f"x{low}"
        force = _format_kg(MEDIAN_CAT_WEIGHT_KG * low)
    else:
        multiplier = f"x{low} - x{high}"
        force = f"{MEDIAN_CAT_WEIGHT_KG * low:g} - {_format_kg(MEDIAN_CAT_WEIGHT_KG * high)}"
    return (t.t(f"ref.impact.{behavior}"), multiplier, force, t.t(f"ref.impact.{behavior}.desc"))


def build_impact_page(t: Translator) -> ReportPage:
    title = t.t("ref.impact.title")
    blocks = (
        Heading(title, subtitle=t.t("ref.impact.desc")),
        Paragraph(t.t("ref.impact.basis")),
        GridTable(
            headers=(t.t("ref.impact.header.behavior"), t.t("ref.impact.header.multiplier"),
                     t.t("ref.impact.header.impact"), t.t("ref.impact.header.description")),
            rows=tuple(_impact_row(behavior, low, high, t) for behavior, low, high in IMPACT_MULTIPLIERS),
        ),
        Paragraph(t.t("ref.impact.extreme.desc"), title=t.t("ref.impact.extreme")),
        Paragraph(t.t("ref.impact.wear.desc"), title=t.t("ref.impact.wear")),
        Note(t.t("ref.impact.disclaimer")),
        Note(t.t("ref.impact.footer")),
    )
    return ReportPage("impact", title, blocks)


@lru_cache(maxsize=None)
def reference_pages(locale: Locale) -> Tuple[ReportPage, ...]:
    """Static reference pages, built once per locale."""
    t = Translator(locale)
    return (build_breeds_page(t), build_multicat_page(t), build_impact_page(t))


def compose_report(
    draft: DraftRecord,
    assessment: Assessment,
    translator: Translator,
    assessed_on: Optional[date] = None,
    include_reference: bool = True
) -> List[ReportPage]:
    """
    Build the report pages for a submitted draft.

    Args:
        draft: Finished DraftRecord (no unanswered sentinels)
        assessment: Score and tier computed from the draft
        translator: Lookup for the session's active locale
        assessed_on: Date printed on the summary page (default: today)
        include_reference: Append the three static reference pages

    Returns:
        Pages in export order, summary first
    """
    pages = [build_summary_page(draft, assessment, translator, assessed_on or date.today())]
    if include_reference:
        pages.extend(reference_pages(translator.locale))
    print(f"[REPORT] Composed {len(pages)} page(s) (locale={translator.locale.value}, "
          f"tier={assessment.tier.value})")
    return pages
