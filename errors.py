"""Error types raised along the comparison pipeline.

Each error knows the HTTP status it maps to and the JSON body the API
returns for it, so the Flask layer only has to serialise.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ComparisonError(Exception):
	status_code = 500
	message = "Internal server error"

	def __init__(self, message: Optional[str] = None, details: Optional[str] = None, status_code: Optional[int] = None) -> None:
		self.message = message or self.message
		self.details = details
		if status_code is not None:
			self.status_code = status_code
		super().__init__(self.message if not details else f"{self.message}: {details}")

	def to_dict(self) -> Dict[str, Any]:
		body: Dict[str, Any] = {"error": self.message}
		if self.details:
			body["details"] = self.details
		return body


class ValidationError(ComparisonError):
	status_code = 400
	message = "Invalid request"


class ConfigurationError(ComparisonError):
	status_code = 500
	message = "API key not configured on server"


class UpstreamError(ComparisonError):
	status_code = 500
	message = "Internal server error"


class UpstreamStatusError(UpstreamError):
	"""Gemini answered with a non-2xx status; the status is passed through."""

	message = "Failed to get comparison from Gemini API"

	def __init__(self, status_code: int, details: Optional[str] = None) -> None:
		super().__init__(details=details or "Unknown API error", status_code=status_code)


class UpstreamUnreachableError(UpstreamError):
	status_code = 503
	message = "Unable to reach Gemini API"

	def __init__(self, details: str = "Please check your internet connection") -> None:
		super().__init__(details=details)


class UnexpectedShapeError(UpstreamError):
	status_code = 500
	message = "Internal server error"

	def __init__(self, details: str = "Unexpected response format from Gemini API") -> None:
		super().__init__(details=details)


class RenderError(ComparisonError):
	status_code = 500
	message = "Failed to generate PDF"
