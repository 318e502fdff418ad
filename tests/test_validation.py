import pytest

from validation import validate_companies


def test_valid_pair_passes():
	assert validate_companies("Microsoft", "Google") is None
	assert validate_companies("  3M  ", "AT&T") is None


@pytest.mark.parametrize(
	"company_a, company_b",
	[("", "Google"), ("Microsoft", ""), ("   ", "Google"), (None, "Google"), ("Microsoft", None)],
)
def test_missing_names(company_a, company_b):
	assert validate_companies(company_a, company_b) == "Please enter both company names to compare"


def test_length_rules_in_order():
	assert validate_companies("A", "Google") == "Company A name must be at least 2 characters long"
	assert validate_companies("Microsoft", "G") == "Company B name must be at least 2 characters long"
	assert validate_companies("M" * 101, "Google") == "Company A name is too long (maximum 100 characters)"
	assert validate_companies("Microsoft", "G" * 101) == "Company B name is too long (maximum 100 characters)"
	# A-min is reported before B-max
	assert validate_companies("A", "G" * 101) == "Company A name must be at least 2 characters long"


def test_length_counts_trimmed_name():
	assert validate_companies(" A ", "Google") == "Company A name must be at least 2 characters long"
	assert validate_companies("M" * 100, "Google") is None


def test_names_need_letters():
	assert validate_companies("1234", "Google") == "Company A name must contain at least some letters"
	assert validate_companies("Microsoft", "!!!") == "Company B name must contain at least some letters"


def test_same_company_case_insensitive():
	assert validate_companies("Apple", "Apple") == "Please enter two different companies to compare"
	assert validate_companies("apple", "APPLE ") == "Please enter two different companies to compare"


@pytest.mark.parametrize("placeholder", ["company", "Example", "TEST", "placeholder", "Enter Company"])
def test_placeholder_names(placeholder):
	assert validate_companies(placeholder, "Google") == "Please enter real company names instead of placeholder text"


def test_placeholder_must_match_exactly():
	assert validate_companies("Test Automation Inc", "Google") is None


@pytest.mark.parametrize(
	"name",
	["<script>alert(1)</script>", "javascript:void(0)", "x onerror=alert(1)", "Acme ONCLICK=go()"],
)
def test_injection_patterns(name):
	assert validate_companies(name, "Google") == "Invalid characters detected in company names"
	assert validate_companies("Google", name) == "Invalid characters detected in company names"
