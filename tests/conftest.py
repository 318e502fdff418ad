from unittest.mock import MagicMock

import pytest

from config import Settings
from gemini import GeminiClient
from server import create_app

SAMPLE_RESPONSE = """| Attribute | Microsoft | Google |
|-----------|-------------|-------------|
| Industry | Software | Internet services |
| CEO | Satya Nadella | Sundar Pichai |

Microsoft leads in enterprise software while Google dominates search.

Both invest heavily in cloud and AI."""


def make_settings(**overrides) -> Settings:
	values = {
		"gemini_api_key": "test-gemini-key",
		"tavily_api_key": None,
		"environment": "development",
		"cors_origin": None,
		"general_rate_limit": "100 per 15 minutes",
		"compare_rate_limit": "10 per 15 minutes",
		"rate_limit_storage_uri": "memory://",
		"trusted_proxy_hops": 1,
	}
	values.update(overrides)
	return Settings(**values)


@pytest.fixture
def sample_response() -> str:
	return SAMPLE_RESPONSE


@pytest.fixture
def gemini_client() -> MagicMock:
	client = MagicMock(spec=GeminiClient)
	client.configured = True
	client.complete.return_value = SAMPLE_RESPONSE
	return client


@pytest.fixture
def settings() -> Settings:
	return make_settings()


@pytest.fixture
def app(settings, gemini_client):
	app = create_app(settings, gemini_client=gemini_client)
	app.config["TESTING"] = True
	return app


@pytest.fixture
def client(app):
	return app.test_client()


@pytest.fixture
def make_app(gemini_client):
	def _make(search_fn=None, **overrides):
		return create_app(make_settings(**overrides), gemini_client=gemini_client, search_fn=search_fn)

	return _make
