from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Optional, Sequence, Tuple

import requests
from pydantic import ValidationError as PydanticValidationError

from schemas import SearchHit, SearchResult

logger = logging.getLogger(__name__)

TAVILY_SEARCH_URL = "https://api.tavily.com/search"
MAX_SOURCES_PER_QUERY = 3
RAW_CONTENT_LIMIT = 500

# (label, query template); order here is the order of sections in the context
_QUERY_TEMPLATES: Tuple[Tuple[str, str], ...] = (
	("Company overview", "{a} vs {b} company overview founding year CEO headquarters"),
	("Market and funding", "{a} vs {b} market share revenue funding valuation"),
	("Products and achievements", "{a} vs {b} key products services notable achievements"),
)

SearchFn = Callable[[str], Optional[SearchResult]]


def build_search_queries(company_a: str, company_b: str) -> List[Tuple[str, str]]:
	a = (company_a or "").strip()
	b = (company_b or "").strip()
	return [(label, template.format(a=a, b=b)) for label, template in _QUERY_TEMPLATES]


def _parse_search_payload(payload: Any) -> Optional[SearchResult]:
	if not isinstance(payload, dict):
		return None
	hits: List[SearchHit] = []
	for item in payload.get("results") or []:
		if not isinstance(item, dict):
			continue
		hits.append(
			SearchHit(
				title=(item.get("title") or "").strip(),
				url=(item.get("url") or "").strip(),
				content=(item.get("content") or "").strip(),
				raw_content=item.get("raw_content") or None,
			)
		)
	answer = payload.get("answer")
	return SearchResult(answer=answer.strip() if isinstance(answer, str) and answer.strip() else None, results=hits)


def run_search_query(
	query: str,
	api_key: str,
	search_url: str = TAVILY_SEARCH_URL,
	timeout: float = 20,
	session: Optional[requests.Session] = None,
) -> Optional[SearchResult]:
	"""Run one search query. Any failure yields None; nothing is retried."""
	http = session or requests
	body = {
		"query": query,
		"search_depth": "advanced",
		"include_answer": True,
		"include_raw_content": True,
		"max_results": MAX_SOURCES_PER_QUERY,
	}
	headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}
	try:
		resp = http.post(search_url, json=body, headers=headers, timeout=timeout)
		resp.raise_for_status()
		result = _parse_search_payload(resp.json())
	except (requests.RequestException, ValueError, PydanticValidationError):
		logger.exception("Search request failed for query '%s'", query)
		return None
	if result is None:
		logger.warning("Search response for query '%s' was not an object", query)
	return result


def format_search_section(label: str, result: SearchResult) -> str:
	lines = [f"### {label}"]
	if result.answer:
		lines.append(f"Direct answer: {result.answer}")
	for idx, hit in enumerate(result.results[:MAX_SOURCES_PER_QUERY], start=1):
		lines.append(f"Source {idx}: {hit.title}")
		lines.append(f"URL: {hit.url}")
		lines.append(f"Snippet: {hit.content}")
		if hit.raw_content:
			lines.append(f"Excerpt: {hit.raw_content[:RAW_CONTENT_LIMIT]}")
	return "\n".join(lines)


def combine_search_results(labelled: Sequence[Tuple[str, Optional[SearchResult]]]) -> str:
	"""Join the successful results in query order; failed (None) slices contribute nothing."""
	sections = [format_search_section(label, result) for label, result in labelled if result is not None]
	return "\n\n".join(sections)


def search_company_context(
	company_a: str,
	company_b: str,
	api_key: Optional[str],
	search_url: str = TAVILY_SEARCH_URL,
	timeout: float = 20,
	search_fn: Optional[SearchFn] = None,
) -> str:
	"""Run the three comparison queries concurrently and return the combined context block."""
	queries = build_search_queries(company_a, company_b)
	if search_fn is None:
		if not api_key:
			logger.warning("Web search requested but no search API key is configured; continuing without context")
			return ""

		def _search(query: str) -> Optional[SearchResult]:
			return run_search_query(query, api_key=api_key, search_url=search_url, timeout=timeout)

		search_fn = _search

	logger.info("Running %s search queries for '%s' vs '%s'", len(queries), company_a, company_b)
	with ThreadPoolExecutor(max_workers=len(queries)) as executor:
		futures = [executor.submit(search_fn, query) for _, query in queries]
		outcomes: List[Optional[SearchResult]] = []
		for (label, _), future in zip(queries, futures):
			try:
				outcomes.append(future.result())
			except Exception:
				logger.exception("Search query '%s' raised", label)
				outcomes.append(None)

	labelled = [(label, outcome) for (label, _), outcome in zip(queries, outcomes)]
	succeeded = sum(1 for _, outcome in labelled if outcome is not None)
	logger.info("Search complete: %s/%s queries succeeded", succeeded, len(labelled))
	return combine_search_results(labelled)

