import io
from datetime import datetime, timezone

import pytest
from bs4 import BeautifulSoup
from pypdf import PdfReader

from errors import RenderError
from renderers import (
	INVALID_TABLE_MESSAGE,
	NO_SUMMARY_MESSAGE,
	NO_TABLE_MESSAGE,
	build_comparison_pdf,
	markdown_table_to_html,
	render_comparison_html,
	split_cells,
	summary_to_html,
)


def _pdf_text(data: bytes) -> str:
	reader = PdfReader(io.BytesIO(data))
	return "\n".join(page.extract_text() or "" for page in reader.pages)


def test_split_cells_drops_empty_segments():
	assert split_cells("| a | b |  | c |") == ["a", "b", "c"]
	assert split_cells("|---|") == ["---"]


def test_basic_table_rendering():
	html = markdown_table_to_html("|A|B|C|\n|---|---|---|\n|1|2|3|")
	soup = BeautifulSoup(html, "lxml")
	table = soup.find("table", class_="comparison-table")
	header_rows = table.find("thead").find_all("tr")
	body_rows = table.find("tbody").find_all("tr")
	assert len(header_rows) == 1
	assert [th.get_text() for th in header_rows[0].find_all("th")] == ["A", "B", "C"]
	assert len(body_rows) == 1
	assert [td.get_text() for td in body_rows[0].find_all("td")] == ["1", "2", "3"]
	assert "---" not in html


def test_second_line_is_skipped_even_if_not_a_separator():
	html = markdown_table_to_html("| H |\n| not dashes |\n| kept |")
	soup = BeautifulSoup(html, "lxml")
	assert [td.get_text() for td in soup.find_all("td")] == ["kept"]
	assert "not dashes" not in html


def test_blank_lines_and_empty_rows_are_ignored():
	html = markdown_table_to_html("| H1 | H2 |\n\n|---|---|\n|  |  |\n| x | y |")
	soup = BeautifulSoup(html, "lxml")
	assert len(soup.find("tbody").find_all("tr")) == 1


def test_cell_text_is_escaped():
	html = markdown_table_to_html("| <b>A</b> |\n|---|\n| <img src=x> |")
	soup = BeautifulSoup(html, "lxml")
	assert soup.find("b") is None
	assert soup.find("img") is None
	assert soup.find("th").get_text() == "<b>A</b>"


def test_empty_and_short_tables_show_placeholders():
	assert NO_TABLE_MESSAGE in markdown_table_to_html("")
	assert INVALID_TABLE_MESSAGE in markdown_table_to_html("| only header |")
	assert "<table" not in markdown_table_to_html("| only header |")


def test_summary_placeholder():
	assert summary_to_html("") == f"<p>{NO_SUMMARY_MESSAGE}</p>"
	assert summary_to_html("A & B") == "<p>A &amp; B</p>"


def test_render_comparison_html(sample_response):
	table_html, summary_html = render_comparison_html(sample_response)
	assert "<th>Microsoft</th>" in table_html
	assert "Google dominates search" in summary_html


def test_render_comparison_html_without_table():
	table_html, summary_html = render_comparison_html("Just prose.")
	assert NO_TABLE_MESSAGE in table_html
	assert "Just prose." in summary_html


def test_pdf_contains_report_sections(sample_response):
	when = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
	data = build_comparison_pdf("Microsoft", "Google", sample_response, "gemini-2.5-flash", generated_at=when)
	assert data.startswith(b"%PDF")
	text = _pdf_text(data)
	assert "Competitor Analysis Report" in text
	assert "2026-01-02 03:04:05" in text
	assert "gemini-2.5-flash" in text
	assert "Microsoft vs Google" in text
	assert "Comparison Table" in text
	assert "Satya Nadella" in text
	assert "Summary" in text


@pytest.mark.parametrize(
	"response_text",
	[
		"",
		"Only a summary, no table here.",
		"| A | B |\n|---|---|\n| 1 | 2 |",
		"| A | B | C |\n|---|---|---|\n| 1 |\n| 1 | 2 | 3 | 4 | 5 | 6 | 7 |",
	],
)
def test_pdf_never_fails_on_partial_input(response_text):
	data = build_comparison_pdf("Acme", "Globex", response_text, "gemini-2.0-flash")
	reader = PdfReader(io.BytesIO(data))
	assert len(reader.pages) >= 1


def test_pdf_handles_cell_taller_than_a_page():
	verbose = "word " * 6000
	response_text = f"| Attribute | Acme | Globex |\n|---|---|---|\n| Industry | {verbose}| Retail |\n| CEO | Jane Roe | John Doe |\n\nSummary."
	data = build_comparison_pdf("Acme", "Globex", response_text, "gemini-2.0-flash")
	reader = PdfReader(io.BytesIO(data))
	assert len(reader.pages) > 2
	text = "\n".join(page.extract_text() or "" for page in reader.pages)
	assert "Retail" in text
	assert "Jane Roe" in text
	assert "Summary." in text


def test_pdf_omits_empty_sections():
	text = _pdf_text(build_comparison_pdf("Acme", "Globex", "Only a summary.", "gemini-2.0-flash"))
	assert "Comparison Table" not in text
	assert "Only a summary." in text

	text = _pdf_text(build_comparison_pdf("Acme", "Globex", "| A | B |\n|---|---|", "gemini-2.0-flash"))
	assert "Comparison Table" in text
	assert "Summary" not in text


def test_pdf_escapes_markup_in_names():
	data = build_comparison_pdf("R&D <Labs>", "Globex", "text", "gemini-2.0-flash")
	assert "R&D <Labs> vs Globex" in _pdf_text(data)


def test_pdf_layout_failure_becomes_render_error(monkeypatch):
	def broken_build(self, flowables, *args, **kwargs):
		raise ValueError("layout exploded")

	monkeypatch.setattr("renderers.SimpleDocTemplate.build", broken_build)
	with pytest.raises(RenderError) as excinfo:
		build_comparison_pdf("Acme", "Globex", "text", "gemini-2.0-flash")
	assert excinfo.value.status_code == 500
	assert "layout exploded" in excinfo.value.details
