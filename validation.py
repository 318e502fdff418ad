from __future__ import annotations

import re
from typing import Optional

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100

_PLACEHOLDER_NAMES = {"company", "example", "test", "placeholder", "enter company"}
_LETTER_PATTERN = re.compile(r"[a-zA-Z]")
_DANGEROUS_PATTERN = re.compile(r"<script|javascript:|onerror=|onclick=", re.IGNORECASE)


def validate_companies(company_a: Optional[str], company_b: Optional[str]) -> Optional[str]:
	"""Return the first violated rule's message, or None when both names are usable."""
	a = (company_a or "").strip()
	b = (company_b or "").strip()

	if not a or not b:
		return "Please enter both company names to compare"

	if len(a) < MIN_NAME_LENGTH:
		return f"Company A name must be at least {MIN_NAME_LENGTH} characters long"
	if len(b) < MIN_NAME_LENGTH:
		return f"Company B name must be at least {MIN_NAME_LENGTH} characters long"
	if len(a) > MAX_NAME_LENGTH:
		return f"Company A name is too long (maximum {MAX_NAME_LENGTH} characters)"
	if len(b) > MAX_NAME_LENGTH:
		return f"Company B name is too long (maximum {MAX_NAME_LENGTH} characters)"

	if not _LETTER_PATTERN.search(a):
		return "Company A name must contain at least some letters"
	if not _LETTER_PATTERN.search(b):
		return "Company B name must contain at least some letters"

	if a.lower() == b.lower():
		return "Please enter two different companies to compare"

	if a.lower() in _PLACEHOLDER_NAMES or b.lower() in _PLACEHOLDER_NAMES:
		return "Please enter real company names instead of placeholder text"

	if _DANGEROUS_PATTERN.search(a) or _DANGEROUS_PATTERN.search(b):
		return "Invalid characters detected in company names"

	return None
