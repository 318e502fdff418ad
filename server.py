from __future__ import annotations

import io
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from flask import Blueprint, Flask, jsonify, request, send_file
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from limits import parse as parse_limit
from werkzeug.exceptions import HTTPException
from werkzeug.middleware.proxy_fix import ProxyFix

from config import Settings, configure_logging
from errors import ComparisonError, ConfigurationError, ValidationError
from gemini import GeminiClient, resolve_model
from prompts import build_comparison_prompt, is_rejection
from renderers import build_comparison_pdf
from schemas import ComparisonRequest, ComparisonResponse, PdfRequest
from search import SearchFn, search_company_context
from validation import validate_companies

logger = logging.getLogger(__name__)

GENERAL_LIMIT_MESSAGE = "Too many requests from this IP address. Please try again later."
COMPARE_LIMIT_MESSAGE = "You have made too many comparison requests. Please wait before trying again."


def _humanize_seconds(seconds: int) -> str:
	for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
		if seconds >= size and seconds % size == 0:
			count = seconds // size
			return f"{count} {unit}" + ("" if count == 1 else "s")
	return f"{seconds} second" + ("" if seconds == 1 else "s")


def _limit_body(message: str, limit_string: str, include_limit: bool) -> Dict[str, Any]:
	item = parse_limit(limit_string)
	body: Dict[str, Any] = {"error": message, "retryAfter": _humanize_seconds(item.get_expiry())}
	if include_limit:
		body["limit"] = item.amount
	return body


def _json_body() -> Dict[str, Any]:
	payload = request.get_json(silent=True)
	return payload if isinstance(payload, dict) else {}


def create_app(
	settings: Optional[Settings] = None,
	gemini_client: Optional[GeminiClient] = None,
	search_fn: Optional[SearchFn] = None,
) -> Flask:
	"""Build the API application.

	Rate-limit counters live in a Limiter owned by this app, so every app
	(and every test) starts from empty windows.
	"""
	settings = settings or Settings()
	client = gemini_client or GeminiClient(settings.gemini_api_key, base_url=settings.gemini_base_url)
	started = time.monotonic()

	app = Flask(__name__)
	if settings.trusted_proxy_hops > 0:
		app.wsgi_app = ProxyFix(app.wsgi_app, x_for=settings.trusted_proxy_hops)

	cors_origin = settings.resolved_cors_origin()
	if cors_origin:
		CORS(
			app,
			origins=cors_origin,
			methods=["GET", "POST", "OPTIONS"],
			allow_headers=["Content-Type"],
			supports_credentials=False,
			max_age=86400,
		)

	limiter = Limiter(
		get_remote_address,
		app=app,
		default_limits=[],
		storage_uri=settings.rate_limit_storage_uri,
		headers_enabled=True,
	)
	general_limit = limiter.shared_limit(settings.general_rate_limit, scope="api", error_message=GENERAL_LIMIT_MESSAGE)
	compare_limit = limiter.limit(settings.compare_rate_limit, error_message=COMPARE_LIMIT_MESSAGE)
	app.extensions["comparison_limiter"] = limiter

	@app.get("/health")
	@limiter.exempt
	def health():
		return jsonify(
			{
				"status": "Server is running",
				"timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
				"uptime": round(time.monotonic() - started, 3),
			}
		)

	api = Blueprint("api", __name__, url_prefix="/api")

	@api.post("/compare")
	@general_limit
	@compare_limit
	def compare():
		body = ComparisonRequest.model_validate(_json_body())
		error = validate_companies(body.company_a, body.company_b)
		if error:
			raise ValidationError(error)

		selected_model = resolve_model(body.model)
		logger.info("Using model: %s for comparison of %s vs %s", selected_model, body.company_a, body.company_b)

		if not client.configured:
			raise ConfigurationError()

		search_context = ""
		if body.use_web_search:
			search_context = search_company_context(
				body.company_a,
				body.company_b,
				api_key=settings.tavily_api_key,
				search_url=settings.tavily_search_url,
				timeout=settings.search_timeout_seconds,
				search_fn=search_fn,
			)

		prompt = build_comparison_prompt(body.company_a, body.company_b, search_context or None)
		response_text = client.complete(prompt, selected_model, with_search=bool(search_context))
		if is_rejection(response_text):
			logger.info("Model rejected the pair %s vs %s as invalid companies", body.company_a, body.company_b)

		result = ComparisonResponse(
			company_a=body.company_a,
			company_b=body.company_b,
			model=selected_model,
			response_text=response_text,
		)
		return jsonify(result.to_json())

	@api.post("/download-pdf")
	@general_limit
	def download_pdf():
		body = PdfRequest.model_validate(_json_body())
		missing = body.missing_fields()
		if missing:
			raise ValidationError(f"Missing required fields: {', '.join(missing)}")

		pdf_bytes = build_comparison_pdf(body.company_a, body.company_b, body.response_text, body.model)
		filename = f"{body.company_a}_vs_{body.company_b}_Comparison.pdf"
		return send_file(
			io.BytesIO(pdf_bytes),
			mimetype="application/pdf",
			as_attachment=True,
			download_name=filename,
		)

	# Unknown /api paths still count against the general limit
	@api.route("/<path:subpath>", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
	@general_limit
	def api_not_found(subpath: str):
		return jsonify({"error": "Not found"}), 404

	app.register_blueprint(api)

	@app.errorhandler(429)
	def rate_limited(exc):
		logger.warning("Rate limit exceeded for IP: %s (%s)", get_remote_address(), request.path)
		if getattr(exc, "description", "") == COMPARE_LIMIT_MESSAGE:
			body = _limit_body(COMPARE_LIMIT_MESSAGE, settings.compare_rate_limit, include_limit=True)
		else:
			body = _limit_body(GENERAL_LIMIT_MESSAGE, settings.general_rate_limit, include_limit=False)
		response = jsonify(body)
		response.status_code = 429
		return response

	@app.errorhandler(ComparisonError)
	def comparison_error(exc: ComparisonError):
		if exc.status_code >= 500:
			logger.error("Error in %s: %s", request.path, exc)
		return jsonify(exc.to_dict()), exc.status_code

	@app.errorhandler(Exception)
	def unexpected_error(exc: Exception):
		if isinstance(exc, HTTPException):
			return exc
		logger.exception("Error in %s", request.path)
		return jsonify({"error": "Internal server error", "details": str(exc)}), 500

	return app


def main() -> None:
	settings = Settings()
	configure_logging(settings.log_level)
	app = create_app(settings)
	logger.info("Server running on port %s", settings.port)
	logger.info("Health check: http://localhost:%s/health", settings.port)
	logger.info("Rate limiting enabled:")
	logger.info("  - General API: %s", settings.general_rate_limit)
	logger.info("  - Comparisons: %s", settings.compare_rate_limit)
	app.run(host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
	main()
