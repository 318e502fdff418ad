import logging
from typing import Any, Dict, Optional

import requests
import streamlit as st

from config import Settings, configure_logging
from gemini import ALLOWED_MODELS, DEFAULT_MODEL
from renderers import render_comparison_html
from validation import validate_companies

settings = Settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

COMPARE_TIMEOUT_SECONDS = 90
PDF_TIMEOUT_SECONDS = 60


st.set_page_config(page_title="Competitor Analysis", page_icon="📊", layout="wide")


def apply_dark_theme() -> None:
	st.markdown(
		"""
		<style>
		:root, .stApp {
			color-scheme: dark;
		}
		.stApp {
			background-color: #0b0d12;
			color: #f1f5f9;
		}
		h1, h2, h3, h4, h5, h6, label, p, span {
			color: #f1f5f9 !important;
		}
		input, textarea, select {
			background-color: #1f2937 !important;
			color: #f1f5f9 !important;
			border: 1px solid #374151 !important;
			border-radius: 6px !important;
		}
		button, .stButton button, .stDownloadButton button {
			background-color: #2563eb !important;
			color: #f8fafc !important;
			border: none !important;
			border-radius: 6px !important;
		}
		.stForm {
			background-color: #111827;
			padding: 24px 28px;
			border-radius: 16px;
			border: 1px solid #1f2937;
		}
		table.comparison-table {
			width: 100%;
			border-collapse: collapse;
			margin-bottom: 16px;
		}
		table.comparison-table th, table.comparison-table td {
			border: 1px solid #374151;
			padding: 8px 12px;
			text-align: left;
			vertical-align: top;
		}
		table.comparison-table th {
			background-color: #1f2937;
		}
		</style>
		""",
		unsafe_allow_html=True,
	)


def _error_from_response(resp: requests.Response, fallback: str) -> str:
	try:
		data = resp.json()
	except ValueError:
		return fallback
	if isinstance(data, dict) and data.get("error"):
		return str(data["error"])
	return fallback


def request_comparison(company_a: str, company_b: str, model: str, use_web_search: bool) -> Dict[str, Any]:
	url = f"{settings.backend_url.rstrip('/')}/api/compare"
	logger.info("main: requesting comparison %s vs %s model=%s search=%s", company_a, company_b, model, use_web_search)
	resp = requests.post(
		url,
		json={"companyA": company_a, "companyB": company_b, "model": model, "useWebSearch": use_web_search},
		timeout=COMPARE_TIMEOUT_SECONDS,
	)
	if not resp.ok:
		raise RuntimeError(_error_from_response(resp, "Failed to get comparison"))
	return resp.json()


def request_pdf(comparison: Dict[str, Any]) -> Optional[bytes]:
	url = f"{settings.backend_url.rstrip('/')}/api/download-pdf"
	payload = {key: comparison.get(key) for key in ("companyA", "companyB", "responseText", "model")}
	try:
		resp = requests.post(url, json=payload, timeout=PDF_TIMEOUT_SECONDS)
		resp.raise_for_status()
	except requests.RequestException:
		logger.exception("PDF download failed for %s vs %s", payload.get("companyA"), payload.get("companyB"))
		return None
	return resp.content


def render_results(comparison: Dict[str, Any]) -> None:
	table_html, summary_html = render_comparison_html(comparison.get("responseText") or "")
	st.subheader(f"{comparison.get('companyA')} vs {comparison.get('companyB')}")
	st.caption(f"Model: {comparison.get('model')} · Generated {comparison.get('timestamp')}")
	st.markdown(table_html, unsafe_allow_html=True)
	st.subheader("Summary")
	st.markdown(summary_html, unsafe_allow_html=True)

	# Streamlit reruns the script on every widget interaction; fetch the PDF once per comparison
	pdf_key = f"pdf:{comparison.get('timestamp')}"
	if pdf_key not in st.session_state:
		st.session_state[pdf_key] = request_pdf(comparison)
	pdf_bytes = st.session_state[pdf_key]
	if pdf_bytes is None:
		st.warning("Failed to generate the PDF report. Please try again.")
		return
	st.download_button(
		label="Download PDF Report",
		data=pdf_bytes,
		file_name=f"{comparison.get('companyA')}_vs_{comparison.get('companyB')}_Comparison.pdf",
		mime="application/pdf",
	)


def main() -> None:
	apply_dark_theme()
	st.title("Competitor Analysis")
	st.write("Enter two companies to get a side-by-side comparison table and a short summary.")

	with st.form("compare_form"):
		col1, col2 = st.columns(2)
		with col1:
			company_a = st.text_input("Company A", placeholder="Microsoft")
		with col2:
			company_b = st.text_input("Company B", placeholder="Google")
		model = st.selectbox("Model", ALLOWED_MODELS, index=ALLOWED_MODELS.index(DEFAULT_MODEL))
		use_web_search = st.checkbox("Use web search for recent information", value=False)
		submit = st.form_submit_button("Compare Now")

	if submit:
		company_a = (company_a or "").strip()
		company_b = (company_b or "").strip()
		error = validate_companies(company_a, company_b)
		if error:
			st.error(error)
			st.stop()
		with st.spinner("Comparing..."):
			try:
				st.session_state["comparison"] = request_comparison(company_a, company_b, model, use_web_search)
			except (requests.RequestException, RuntimeError) as exc:
				logger.exception("Comparison request failed")
				st.error(str(exc) or "Failed to compare companies. Please try again.")
				st.stop()

	comparison = st.session_state.get("comparison")
	if comparison:
		render_results(comparison)


if __name__ == "__main__":
	main()
