import re

from schemas import SplitResult

_BLOCK_SEPARATOR = re.compile(r"\n\n+")


def _is_table_line(text: str) -> bool:
	return text.strip().startswith("|")


def split_response(text: str) -> SplitResult:
	"""Separate the markdown table of a model response from the prose summary after it.

	Blocks are separated by blank lines. The first run of consecutive blocks that
	start with a pipe is the table; blocks after it form the summary and blocks
	before it are dropped. Without any pipe-led block, every pipe-led line goes to
	the table and every other non-blank line to the summary.
	"""
	text = text or ""
	parts = _BLOCK_SEPARATOR.split(text)

	start = next((idx for idx, part in enumerate(parts) if _is_table_line(part)), None)
	if start is not None:
		end = start
		while end + 1 < len(parts) and _is_table_line(parts[end + 1]):
			end += 1
		return SplitResult(
			table_markdown="\n".join(parts[start : end + 1]),
			summary_text="\n\n".join(parts[end + 1 :]).strip(),
		)

	lines = text.split("\n")
	table_lines = [line for line in lines if _is_table_line(line)]
	summary_lines = [line for line in lines if not _is_table_line(line) and line.strip()]
	return SplitResult(
		table_markdown="\n".join(table_lines),
		summary_text="\n".join(summary_lines).strip(),
	)
