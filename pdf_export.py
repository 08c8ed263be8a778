"""
PDF export for CatGuard assessment reports.

Each ReportPage becomes exactly one A4 portrait page, drawn with fpdf2 in the
order the composer produced them. Automatic page breaks are off: content
taller than one page is clipped at the bottom margin, never carried over.

Fonts:
    Helvetica (core font, Latin-1 only) unless a Unicode TTF is available:
    REPORT_FONT_PATH first, then a CJK font from assets/fonts or the usual
    system locations (see config.discover_report_font). Text the active font
    cannot encode fails the export with ExportError.
"""
import os
import re
from datetime import date
from typing import Optional, Sequence

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from config import get_report_font_path
from localization import Translator
from report import ReportPage


CUSTOM_FONT_FAMILY = "ReportFont"
CORE_FONT_FAMILY = "Helvetica"
BOTTOM_LIMIT_MM = 22  # keep clear of the footer
FILENAME_PREFIX = "CatSafetyAssessment"
MAX_FILENAME_ADDRESS = 40

FLAG_TEXT_RGB = (220, 38, 38)
FLAG_FILL_RGB = (254, 226, 226)
HEADER_FILL_RGB = (240, 240, 240)
BODY_TEXT_RGB = (30, 30, 30)
MUTED_TEXT_RGB = (100, 100, 100)


class ExportError(Exception):
    """The report could not be rendered to PDF."""


class AssessmentReportPDF(FPDF):
    def __init__(self, header_text: str = "", font_path: Optional[str] = None):
        super().__init__(orientation="P", unit="mm", format="A4")
        self.header_text = header_text
        self.report_font = CORE_FONT_FAMILY
        if font_path:
            for style in ("", "B", "I"):
                self.add_font(CUSTOM_FONT_FAMILY, style=style, fname=font_path)
            self.report_font = CUSTOM_FONT_FAMILY
        self.set_auto_page_break(auto=False)
        self.set_margins(15, 15, 15)

    def header(self):
        if not self.header_text:
            return
        self.set_font(self.report_font, 'B', 9)
        self.set_text_color(*MUTED_TEXT_RGB)
        self.cell(0, 8, self.header_text, align='C', new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.ln(2)

    def footer(self):
        self.set_y(-15)
        self.set_font(self.report_font, 'I', 8)
        self.set_text_color(128, 128, 128)
        self.cell(0, 10, f'{self.page_no()} / {{nb}}', align='C')

    @property
    def content_bottom(self) -> float:
        return self.h - BOTTOM_LIMIT_MM

    def section_title(self, title: str):
        self.set_font(self.report_font, 'B', 11)
        self.set_text_color(0, 0, 0)
        self.ln(2)
        self.cell(0, 7, title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_draw_color(200, 200, 200)
        self.set_line_width(0.3)
        self.line(self.l_margin, self.get_y(), self.w - self.r_margin, self.get_y())
        self.ln(2)

    def body_text(self, text: str, size: int = 10):
        self.set_font(self.report_font, '', size)
        self.set_text_color(*BODY_TEXT_RGB)
        self.set_x(self.l_margin)
        self.multi_cell(0, 5.5, text, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.ln(1.5)

    def key_value_row(self, key: str, value: str, key_width: float = 60):
        self.set_font(self.report_font, '', 9)
        self.set_text_color(*BODY_TEXT_RGB)
        self.cell(key_width, 7, key, border=1)
        self.cell(0, 7, value, border=1, new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def score_row(self, label: str, display: str, flagged: bool, label_width: float = 120):
        self.set_font(self.report_font, 'B' if flagged else '', 9)
        if flagged:
            self.set_fill_color(*FLAG_FILL_RGB)
            self.set_text_color(*FLAG_TEXT_RGB)
        else:
            self.set_fill_color(255, 255, 255)
            self.set_text_color(*BODY_TEXT_RGB)
        self.cell(label_width, 7, label, border=1, fill=flagged)
        self.cell(0, 7, display, border=1, align='R', fill=flagged,
                  new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_text_color(*BODY_TEXT_RGB)


class ReportRenderer:
    """
    Draws composed report pages onto an AssessmentReportPDF.

    render(page) adds exactly one PDF page for one ReportPage.
    """

    def __init__(self, pdf: AssessmentReportPDF):
        self.pdf = pdf

    def render(self, page: ReportPage) -> None:
        self.pdf.add_page()
        for index, block in enumerate(page.blocks):
            if self.pdf.get_y() >= self.pdf.content_bottom:
                print(f"[PDF][CLIPPED] Page '{page.name}': dropped {len(page.blocks) - index} block(s) "
                      f"past the bottom margin")
                break
            getattr(self, f"_render_{block.kind}")(block)

    def _render_heading(self, block):
        pdf = self.pdf
        pdf.set_font(pdf.report_font, 'B', 16)
        pdf.set_text_color(0, 0, 0)
        pdf.multi_cell(0, 9, block.text, align='C', new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        if block.subtitle:
            pdf.set_font(pdf.report_font, '', 10)
            pdf.set_text_color(*MUTED_TEXT_RGB)
            pdf.multi_cell(0, 6, block.subtitle, align='C', new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(4)

    def _render_banner(self, block):
        pdf = self.pdf
        pdf.set_font(pdf.report_font, 'B', 13)
        pdf.set_fill_color(*block.color_rgb)
        pdf.set_text_color(255, 255, 255)
        text = f"{block.label}   {block.score} / {block.max_score} {block.unit}"
        pdf.cell(0, 12, text, align='C', fill=True, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_text_color(*BODY_TEXT_RGB)
        pdf.ln(3)

    def _render_paragraph(self, block):
        pdf = self.pdf
        if block.title:
            pdf.set_font(pdf.report_font, 'B', 10)
            pdf.set_text_color(0, 0, 0)
            pdf.cell(0, 6, block.title, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.body_text(block.text)

    def _render_key_value_table(self, block):
        self.pdf.section_title(block.title)
        for key, value in block.rows:
            self.pdf.key_value_row(key, value)
        self.pdf.ln(2)

    def _render_score_table(self, block):
        pdf = self.pdf
        pdf.section_title(block.title)
        for row in block.rows:
            pdf.score_row(row.label, row.display, row.flagged)
        pdf.set_font(pdf.report_font, 'B', 10)
        pdf.set_fill_color(*HEADER_FILL_RGB)
        pdf.cell(120, 8, block.total_label, border=1, fill=True)
        pdf.cell(0, 8, block.total_display, border=1, align='R', fill=True,
                 new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(3)

    def _render_grid_table(self, block):
        pdf = self.pdf
        pdf.set_font(pdf.report_font, '', 9)
        pdf.set_text_color(*BODY_TEXT_RGB)
        with pdf.table(text_align="LEFT", line_height=5.5, width=pdf.epw) as table:
            for cells in (block.headers,) + tuple(block.rows):
                row = table.row()
                for text in cells:
                    row.cell(text)
        pdf.ln(4)

    def _render_note(self, block):
        pdf = self.pdf
        pdf.set_font(pdf.report_font, 'I', 9)
        pdf.set_text_color(*MUTED_TEXT_RGB)
        pdf.set_x(pdf.l_margin)
        pdf.multi_cell(0, 5, block.text, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_text_color(*BODY_TEXT_RGB)
        pdf.ln(2)


def assemble(
    pages: Sequence[ReportPage],
    translator: Optional[Translator] = None,
    font_path: Optional[str] = None
) -> bytes:
    """
    Render pages in order into one PDF document.

    Args:
        pages: Composed report pages, summary first
        translator: Locale for the running header (omitted when None)
        font_path: Unicode TTF; defaults to config.get_report_font_path()

    Returns:
        PDF file content

    Raises:
        ExportError: anything went wrong while rendering
    """
    if not pages:
        raise ExportError("Nothing to export: report has no pages")

    font_path = font_path or get_report_font_path()
    if font_path and not os.path.isfile(font_path):
        raise ExportError(f"Report font not found: {font_path}")

    header_text = translator.t("hero.title") if translator else ""

    try:
        pdf = AssessmentReportPDF(header_text=header_text, font_path=font_path)
        renderer = ReportRenderer(pdf)
        for page in pages:
            renderer.render(page)
        document = bytes(pdf.output())
    except Exception as e:
        print(f"[PDF][ERROR] Export failed: {e}")
        raise ExportError(str(e)) from e

    print(f"[PDF] Exported {len(pages)} page(s), {len(document)} bytes")
    return document


def build_export_filename(address: str, today: Optional[date] = None) -> str:
    """
    Download name: CatSafetyAssessment_<address>_<YYYY-MM-DD>.pdf

    Path separators, reserved characters and control characters are removed
    from the address; whitespace becomes underscores.
    """
    cleaned = re.sub(r'[\\/:*?"<>|\x00-\x1f\x7f]', '', address or '')
    cleaned = re.sub(r'\s+', '_', cleaned.strip()).strip('._')[:MAX_FILENAME_ADDRESS]
    stamp = (today or date.today()).isoformat()
    if cleaned:
        return f"{FILENAME_PREFIX}_{cleaned}_{stamp}.pdf"
    return f"{FILENAME_PREFIX}_{stamp}.pdf"
