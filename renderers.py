from __future__ import annotations

import io
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from xml.sax.saxutils import escape

from bs4 import BeautifulSoup
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from errors import RenderError
from utils import split_response

logger = logging.getLogger(__name__)

NO_TABLE_MESSAGE = "No table data available"
INVALID_TABLE_MESSAGE = "Invalid table format"
NO_SUMMARY_MESSAGE = "No summary available."

PAGE_MARGIN = 0.75 * inch
PDF_COLUMN_WIDTH = 2.3 * inch


def split_cells(line: str) -> List[str]:
	return [cell.strip() for cell in line.split("|") if cell.strip()]


def _table_lines(table_markdown: str) -> List[str]:
	return [line for line in (table_markdown or "").split("\n") if line.strip()]


def _message_html(message: str) -> str:
	soup = BeautifulSoup("", "lxml")
	p = soup.new_tag("p")
	p.string = message
	return str(p)


def markdown_table_to_html(table_markdown: str) -> str:
	"""Render a markdown table as an HTML table.

	Line 0 is the header and line 1 the separator, which is skipped without being
	inspected. Cells are the non-empty pipe-separated segments of each line.
	"""
	if not table_markdown:
		return _message_html(NO_TABLE_MESSAGE)
	lines = _table_lines(table_markdown)
	if len(lines) < 2:
		return _message_html(INVALID_TABLE_MESSAGE)

	soup = BeautifulSoup("", "lxml")
	table = soup.new_tag("table", attrs={"class": "comparison-table"})
	thead = soup.new_tag("thead")
	header_row = soup.new_tag("tr")
	for header in split_cells(lines[0]):
		th = soup.new_tag("th")
		th.string = header
		header_row.append(th)
	thead.append(header_row)
	table.append(thead)

	tbody = soup.new_tag("tbody")
	for line in lines[2:]:
		cells = split_cells(line)
		if not cells:
			continue
		tr = soup.new_tag("tr")
		for cell in cells:
			td = soup.new_tag("td")
			td.string = cell
			tr.append(td)
		tbody.append(tr)
	table.append(tbody)
	return str(table)


def summary_to_html(summary_text: str) -> str:
	return _message_html(summary_text or NO_SUMMARY_MESSAGE)


def render_comparison_html(response_text: str) -> Tuple[str, str]:
	"""Return (table_html, summary_html) for a raw model response."""
	split = split_response(response_text)
	return markdown_table_to_html(split.table_markdown), summary_to_html(split.summary_text)


def _pdf_styles() -> dict:
	styles = getSampleStyleSheet()
	return {
		"title": ParagraphStyle(
			"ReportTitle",
			parent=styles["Heading1"],
			fontSize=22,
			textColor=colors.HexColor("#1f2937"),
			alignment=TA_CENTER,
			spaceAfter=12,
			fontName="Helvetica-Bold",
		),
		"meta": ParagraphStyle(
			"ReportMeta",
			parent=styles["BodyText"],
			fontSize=9,
			textColor=colors.HexColor("#6b7280"),
			alignment=TA_CENTER,
			leading=12,
		),
		"matchup": ParagraphStyle(
			"ReportMatchup",
			parent=styles["Heading2"],
			fontSize=16,
			alignment=TA_CENTER,
			spaceBefore=12,
			spaceAfter=12,
			fontName="Helvetica-Bold",
		),
		"heading": ParagraphStyle(
			"ReportHeading",
			parent=styles["Heading3"],
			fontSize=13,
			spaceBefore=10,
			spaceAfter=6,
			fontName="Helvetica-Bold",
		),
		"cell": ParagraphStyle("ReportCell", parent=styles["BodyText"], fontSize=9, leading=11),
		"header_cell": ParagraphStyle(
			"ReportHeaderCell", parent=styles["BodyText"], fontSize=9, leading=11, fontName="Helvetica-Bold"
		),
		"summary": ParagraphStyle(
			"ReportSummary", parent=styles["BodyText"], fontSize=10, leading=14, alignment=TA_JUSTIFY, spaceAfter=8
		),
	}


def _row_height(cells: List[Paragraph], col_width: float, available_height: float) -> float:
	# Default table cell padding is 6pt on each side
	return max(cell.wrap(max(col_width - 12, 1), available_height)[1] for cell in cells)


def _pdf_table_rows(table_markdown: str, available_width: float, available_height: float, styles: dict) -> list:
	lines = _table_lines(table_markdown)
	flowables = []
	for idx, line in enumerate(lines):
		if idx == 1:
			# markdown separator row
			continue
		cells = split_cells(line)
		if not cells:
			continue
		# Each line is laid out on its own; ragged rows are not padded to the header width
		col_width = min(PDF_COLUMN_WIDTH, available_width / len(cells))
		style = styles["header_cell"] if idx == 0 else styles["cell"]
		paragraphs = [Paragraph(escape(cell), style) for cell in cells]

		# A table row cannot break across pages, so a row taller than a page is stacked instead
		if _row_height(paragraphs, col_width, available_height) > available_height - inch:
			flowables.extend(Paragraph(escape(cell), style) for cell in cells)
			flowables.append(Spacer(1, 4))
			continue

		row = Table([paragraphs], colWidths=[col_width] * len(cells), hAlign="LEFT")
		commands = [
			("VALIGN", (0, 0), (-1, -1), "TOP"),
			("LINEBELOW", (0, 0), (-1, -1), 0.25, colors.HexColor("#d1d5db")),
			("TOPPADDING", (0, 0), (-1, -1), 4),
			("BOTTOMPADDING", (0, 0), (-1, -1), 4),
		]
		if idx == 0:
			commands.append(("BACKGROUND", (0, 0), (-1, -1), colors.HexColor("#e5e7eb")))
		row.setStyle(TableStyle(commands))
		flowables.append(row)
	return flowables


def build_comparison_pdf(
	company_a: str,
	company_b: str,
	response_text: str,
	model: str,
	generated_at: Optional[datetime] = None,
) -> bytes:
	"""Lay out the comparison as a PDF report and return its bytes.

	Empty table or summary sections are left out rather than failing.
	"""
	split = split_response(response_text)
	generated_at = generated_at or datetime.now(timezone.utc)
	buffer = io.BytesIO()
	doc = SimpleDocTemplate(
		buffer,
		pagesize=letter,
		topMargin=PAGE_MARGIN,
		bottomMargin=PAGE_MARGIN,
		leftMargin=PAGE_MARGIN,
		rightMargin=PAGE_MARGIN,
		title=f"{company_a} vs {company_b} Comparison",
	)
	styles = _pdf_styles()

	elements: list = [
		Paragraph("Competitor Analysis Report", styles["title"]),
		Paragraph(escape(f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S %Z').strip()}"), styles["meta"]),
		Paragraph(escape(f"Model: {model}"), styles["meta"]),
		Paragraph(f"<b>{escape(company_a)} vs {escape(company_b)}</b>", styles["matchup"]),
	]

	table_rows = _pdf_table_rows(split.table_markdown, doc.width, doc.height, styles)
	if table_rows:
		elements.append(Paragraph("Comparison Table", styles["heading"]))
		elements.extend(table_rows)
		elements.append(Spacer(1, 0.2 * inch))

	paragraphs = [part.strip() for part in split.summary_text.split("\n\n") if part.strip()]
	if paragraphs:
		elements.append(Paragraph("Summary", styles["heading"]))
		for paragraph in paragraphs:
			elements.append(Paragraph(escape(paragraph).replace("\n", "<br/>"), styles["summary"]))

	try:
		doc.build(elements)
	except Exception as exc:
		logger.exception("PDF generation failed for %s vs %s", company_a, company_b)
		raise RenderError(details=str(exc)) from exc
	logger.info("PDF generated for %s vs %s (%s bytes)", company_a, company_b, buffer.tell())
	return buffer.getvalue()
