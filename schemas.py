"""Request, response and intermediate models for the comparison API."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _utc_now_iso() -> str:
	return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class ComparisonRequest(BaseModel):
	"""Body of POST /api/compare."""

	model_config = ConfigDict(populate_by_name=True)

	company_a: str = Field(default="", alias="companyA")
	company_b: str = Field(default="", alias="companyB")
	model: Optional[str] = None
	use_web_search: bool = Field(default=False, alias="useWebSearch")

	@field_validator("company_a", "company_b", mode="before")
	@classmethod
	def _coerce_name(cls, value: object) -> str:
		if value is None:
			return ""
		return str(value).strip()

	@field_validator("model", mode="before")
	@classmethod
	def _coerce_model(cls, value: object) -> Optional[str]:
		# Unknown model values fall back to the default later on
		return value if isinstance(value, str) else None

	@field_validator("use_web_search", mode="before")
	@classmethod
	def _coerce_flag(cls, value: object) -> bool:
		if isinstance(value, str):
			return value.strip().lower() in {"1", "true", "yes", "on"}
		return bool(value)


class PdfRequest(BaseModel):
	"""Body of POST /api/download-pdf."""

	model_config = ConfigDict(populate_by_name=True)

	company_a: str = Field(default="", alias="companyA")
	company_b: str = Field(default="", alias="companyB")
	response_text: str = Field(default="", alias="responseText")
	model: str = ""

	@field_validator("company_a", "company_b", "response_text", "model", mode="before")
	@classmethod
	def _coerce_text(cls, value: object) -> str:
		return "" if value is None else str(value)

	def missing_fields(self) -> List[str]:
		missing = []
		for alias, value in (
			("companyA", self.company_a),
			("companyB", self.company_b),
			("responseText", self.response_text),
			("model", self.model),
		):
			if not (value or "").strip():
				missing.append(alias)
		return missing


class SearchHit(BaseModel):
	title: str = ""
	url: str = ""
	content: str = ""
	raw_content: Optional[str] = None


class SearchResult(BaseModel):
	"""One successful web-search query. A failed query is represented as None."""

	answer: Optional[str] = None
	results: List[SearchHit] = Field(default_factory=list)


class ComparisonResponse(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	success: bool = True
	company_a: str = Field(alias="companyA")
	company_b: str = Field(alias="companyB")
	model: str
	response_text: str = Field(alias="responseText")
	timestamp: str = Field(default_factory=_utc_now_iso)

	def to_json(self) -> dict:
		return self.model_dump(by_alias=True)


class SplitResult(BaseModel):
	"""Table and summary blocks carved out of a model response."""

	table_markdown: str = ""
	summary_text: str = ""
