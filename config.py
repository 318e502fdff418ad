"""Runtime configuration loaded from the environment and an optional .env file."""

from __future__ import annotations

import logging
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

# Values already present in os.environ win over the project .env
load_dotenv(override=False)


class Settings(BaseSettings):
	model_config = SettingsConfigDict(
		env_file_encoding="utf-8",
		case_sensitive=False,
		extra="ignore",
		populate_by_name=True,
	)

	gemini_api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
	tavily_api_key: Optional[str] = Field(default=None, alias="TAVILY_API_KEY")
	gemini_base_url: str = Field(
		default="https://generativelanguage.googleapis.com/v1beta",
		alias="GEMINI_BASE_URL",
	)
	tavily_search_url: str = Field(default="https://api.tavily.com/search", alias="TAVILY_SEARCH_URL")

	environment: str = Field(default="development", alias="APP_ENV")
	cors_origin: Optional[str] = Field(default=None, alias="CORS_ORIGIN")
	port: int = Field(default=3000, alias="PORT")

	general_rate_limit: str = Field(default="100 per 15 minutes", alias="GENERAL_RATE_LIMIT")
	compare_rate_limit: str = Field(default="10 per 15 minutes", alias="COMPARE_RATE_LIMIT")
	rate_limit_storage_uri: str = Field(default="memory://", alias="RATELIMIT_STORAGE_URI")
	trusted_proxy_hops: int = Field(default=1, alias="TRUSTED_PROXY_HOPS")

	search_timeout_seconds: float = Field(default=20.0, alias="SEARCH_TIMEOUT_SECONDS")
	log_level: str = Field(default="INFO", alias="LOG_LEVEL")

	backend_url: str = Field(default="http://localhost:3000", alias="BACKEND_URL")

	@property
	def is_production(self) -> bool:
		return self.environment.strip().lower() == "production"

	def resolved_cors_origin(self) -> Optional[str]:
		"""Allowed CORS origin: anything in development, only CORS_ORIGIN in production."""
		if self.cors_origin:
			return self.cors_origin
		if self.is_production:
			logger.warning("CORS_ORIGIN not set in production; cross-origin requests are disabled")
			return None
		return "*"


def configure_logging(level: str = "INFO") -> None:
	# Configure logging once
	if not logging.getLogger().handlers:
		logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
