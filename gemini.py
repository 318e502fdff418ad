from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from errors import ConfigurationError, UnexpectedShapeError, UpstreamStatusError, UpstreamUnreachableError

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

# Stable model ids the API accepts; anything else becomes DEFAULT_MODEL
ALLOWED_MODELS = (
	"gemini-2.5-pro",
	"gemini-2.5-flash",
	"gemini-2.5-flash-lite",
	"gemini-2.0-flash",
	"gemini-2.0-flash-lite",
)
DEFAULT_MODEL = "gemini-2.5-flash"

TIMEOUT_SECONDS = 30
TIMEOUT_WITH_SEARCH_SECONDS = 60


def resolve_model(model: Optional[str]) -> str:
	return model if model in ALLOWED_MODELS else DEFAULT_MODEL


def extract_candidate_text(payload: Any) -> str:
	try:
		text = payload["candidates"][0]["content"]["parts"][0]["text"]
	except (KeyError, IndexError, TypeError) as exc:
		raise UnexpectedShapeError() from exc
	if not isinstance(text, str):
		raise UnexpectedShapeError()
	return text


def _upstream_message(resp: requests.Response) -> Optional[str]:
	try:
		data = resp.json()
	except ValueError:
		return None
	if isinstance(data, dict) and isinstance(data.get("error"), dict):
		return data["error"].get("message")
	return None


class GeminiClient:
	"""Single-shot client for the Gemini generateContent endpoint."""

	def __init__(self, api_key: Optional[str], base_url: str = GEMINI_BASE_URL, session: Optional[requests.Session] = None) -> None:
		self.api_key = api_key or ""
		self.base_url = base_url.rstrip("/")
		self.http = session or requests.Session()

	@property
	def configured(self) -> bool:
		return bool(self.api_key)

	def complete(self, prompt: str, model: Optional[str] = None, with_search: bool = False) -> str:
		if not self.api_key:
			raise ConfigurationError()
		selected = resolve_model(model)
		timeout = TIMEOUT_WITH_SEARCH_SECONDS if with_search else TIMEOUT_SECONDS
		url = f"{self.base_url}/models/{selected}:generateContent"
		body = {"contents": [{"parts": [{"text": prompt}]}]}
		headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}

		logger.info("Gemini request model=%s prompt_len=%s timeout=%ss", selected, len(prompt), timeout)
		try:
			resp = self.http.post(url, json=body, headers=headers, timeout=timeout)
		except requests.RequestException as exc:
			logger.error("Gemini unreachable: %s", exc)
			raise UpstreamUnreachableError() from exc

		if not resp.ok:
			message = _upstream_message(resp)
			logger.error("Gemini responded %s: %s", resp.status_code, message)
			raise UpstreamStatusError(resp.status_code, message)

		try:
			payload = resp.json()
		except ValueError as exc:
			raise UnexpectedShapeError() from exc
		text = extract_candidate_text(payload)
		logger.info("Gemini response model=%s text_len=%s", selected, len(text))
		return text
