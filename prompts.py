from __future__ import annotations

from typing import Optional

REJECTION_MESSAGE = (
	"Unable to compare: One or both company names appear to be invalid or not found. "
	"Please verify the company names and try again."
)

COMPARISON_ATTRIBUTES = (
	"Industry",
	"Target Market",
	"Year Founded",
	"CEO",
	"Market Position",
	"Funding Status",
	"Key Products/Services",
	"Notable Achievements",
)


def _table_schema(company_a: str, company_b: str) -> str:
	rows = [
		f"| Attribute | {company_a} | {company_b} |",
		"|-----------|-------------|-------------|",
	]
	rows.extend(f"| {attribute} | [data] | [data] |" for attribute in COMPARISON_ATTRIBUTES)
	return "\n".join(rows)


def build_comparison_prompt(company_a: str, company_b: str, search_context: Optional[str] = None) -> str:
	"""Assemble the analyst prompt; the Context Data section appears only when there is context."""
	sections = [
		"Role:\n"
		"You are a professional business analyst with expertise in corporate research and competitive benchmarking.",
		f"Instruction:\nCompare the two given companies: {company_a} and {company_b}.",
	]
	if search_context and search_context.strip():
		sections.append(
			"Context Data:\n"
			"The following information was gathered from a recent web search. "
			"Treat it as the most current source and let it take precedence over your prior knowledge "
			"wherever the two disagree.\n\n"
			f"{search_context.strip()}"
		)
	sections.append(
		"Present your findings in a structured Markdown table with the following format:\n\n"
		f"{_table_schema(company_a, company_b)}"
	)
	sections.append(
		"After the table, provide a brief summary paragraph (3-5 sentences) highlighting which company "
		"leads in more areas or has notable strengths."
	)
	sections.append(
		"Guardrails:\n"
		f"- If either {company_a} or {company_b} is invalid, not a real company, or cannot be found, "
		f'respond ONLY with: "{REJECTION_MESSAGE}"\n'
		"- Do not hallucinate data. Only use publicly available or commonly known information.\n"
		'- If data is unavailable or inconsistent across sources, write "Data Not Available" in that specific table cell.\n'
		"- Keep the tone objective, factual, and non-opinionated.\n"
		"- Do not add extra commentary outside the table and summary."
	)
	return "\n\n".join(sections)


def is_rejection(response_text: Optional[str]) -> bool:
	"""True when the model answered with the invalid-company sentinel instead of a comparison."""
	text = (response_text or "").strip().strip('"').strip()
	return text == REJECTION_MESSAGE
