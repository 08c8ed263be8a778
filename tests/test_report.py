"""Tests for the report composer."""

from datetime import date

from localization import Locale, Translator
from report import (
    Banner,
    GridTable,
    KeyValueTable,
    MAX_VALUE_CHARS,
    ScoreTable,
    compose_report,
    reference_pages,
)
from scoring import assess


def _compose(draft, locale=Locale.EN):
    return compose_report(draft, assess(draft), Translator(locale), assessed_on=date(2024, 3, 5))


def _block(page, block_type):
    return next(block for block in page.blocks if isinstance(block, block_type))


def test_four_pages_in_order(filled_draft):
    pages = _compose(filled_draft)
    assert [page.name for page in pages] == ["summary", "breeds", "multicat", "impact"]


def test_page_count_does_not_depend_on_locale(filled_draft):
    en = _compose(filled_draft, Locale.EN)
    zh = _compose(filled_draft, Locale.ZH)
    assert len(en) == len(zh)
    assert [len(p.blocks) for p in en] == [len(p.blocks) for p in zh]


def test_summary_only(filled_draft):
    pages = compose_report(filled_draft, assess(filled_draft), Translator(Locale.EN), include_reference=False)
    assert len(pages) == 1


def test_summary_banner(filled_draft):
    banner = _block(_compose(filled_draft)[0], Banner)
    assert banner.label == "[Safe & Stable Level]"
    assert banner.color_token == "risk-low"
    assert banner.score == 6
    assert banner.max_score == 19


def test_summary_date(filled_draft):
    heading = _compose(filled_draft)[0].blocks[0]
    assert heading.subtitle.endswith("05/03/2024")


def test_score_table_flags_high_answers(filled_draft):
    filled_draft.cat_count_score = 3
    table = _block(_compose(filled_draft)[0], ScoreTable)
    flags = [row.flagged for row in table.rows]
    # cat count 3, edge 1, structure 0, personality 2, environment 0, expectation 1
    assert flags == [True, False, False, True, False, False]
    assert table.total_display == "7 / 19 pts"


def test_basic_info_table(filled_draft):
    rows = dict(_block(_compose(filled_draft)[0], KeyValueTable).rows)
    assert rows["Property Type"] == "Apartment"
    assert rows["Windows"] == "6 pcs"
    assert rows["Doors"] == "0 pcs"


def test_long_values_are_shortened(filled_draft):
    filled_draft.address = "Block " * 40
    rows = _block(_compose(filled_draft)[0], KeyValueTable).rows
    address = rows[0][1]
    assert len(address) == MAX_VALUE_CHARS
    assert address.endswith("...")


def test_reference_pages_are_cached_per_locale():
    assert reference_pages(Locale.EN) is reference_pages(Locale.EN)
    assert reference_pages(Locale.EN) is not reference_pages(Locale.ZH)


def test_impact_table_rows():
    impact = reference_pages(Locale.EN)[2]
    table = _block(impact, GridTable)
    assert len(table.headers) == 4
    multipliers = [row[1] for row in table.rows]
    forces = [row[2] for row in table.rows]
    assert multipliers == ["x1", "x3 - x5", "x8 - x12", "x2 - x3"]
    assert forces[0] == "4.5 kg"
    assert forces[1] == "13.5 - 22.5 kg"


def test_pages_serialize(filled_draft):
    data = _compose(filled_draft)[0].to_dict()
    assert data["name"] == "summary"
    assert data["blocks"][0]["kind"] == "heading"
