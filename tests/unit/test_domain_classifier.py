"""Unit tests for DomainClassifier."""

import pytest

from app.core.exceptions import InvalidFormat
from app.models.verification import RejectionReason
from app.services.domain_classifier import (
    DomainClassifier,
    classify,
    derive_company_name,
    registrable_label,
)

BLOCKLIST = ["gmail.com", "yahoo.com", "outlook.com", "hotmail.com"]


@pytest.fixture
def classifier():
    return DomainClassifier(BLOCKLIST)


@pytest.mark.unit
@pytest.mark.parametrize("email", [
    "jane@gmail.com",
    "jane@Gmail.COM",
    "JANE@YAHOO.COM",
    "jane@outlook.com ",
    "jane@hotmail.com.",
])
def test_consumer_domains_rejected_regardless_of_case(classifier, email):
    result = classifier.classify(email)

    assert result.is_company_domain is False
    assert result.derived_company_name is None
    assert result.reason == RejectionReason.consumer_domain


@pytest.mark.unit
def test_consumer_subdomain_rejected(classifier):
    assert classifier.classify("jane@mail.yahoo.com").is_company_domain is False


@pytest.mark.unit
def test_company_domain_accepted(classifier):
    result = classifier.classify("john@acme.com")

    assert result.is_company_domain is True
    assert result.derived_company_name == "Acme"
    assert result.reason is None


@pytest.mark.unit
@pytest.mark.parametrize("email,expected", [
    ("john@acme-corp.com", "Acme Corp"),
    ("john@mail.acme.com", "Acme"),
    ("john@eu.mail.acme.com", "Acme"),
    ("john@acme.co.uk", "Acme"),
    ("john@big_data-labs.io", "Big Data Labs"),
    ("john@acme.inc.com", "Acme"),
    ("john@3m.com", "3M"),
])
def test_company_name_derivation(classifier, email, expected):
    assert classifier.classify(email).derived_company_name == expected


@pytest.mark.unit
def test_empty_derivation_falls_back_to_raw_label():
    assert derive_company_name("---.com") == "---"


@pytest.mark.unit
def test_punycode_label_kept_opaque():
    assert derive_company_name("xn--80ak6aa92e.com") == "xn--80ak6aa92e"


@pytest.mark.unit
def test_registrable_label_ignores_subdomains():
    assert registrable_label("a.b.acme.com") == "acme"
    assert registrable_label("acme.com.au") == "acme"


@pytest.mark.unit
@pytest.mark.parametrize("email", [
    "",
    "no-at-sign.com",
    "two@@acme.com",
    "a@b@acme.com",
    "@acme.com",
    "john@",
    "john@localhost",
    "john@acme..com",
    "john doe@acme.com",
])
def test_invalid_format(classifier, email):
    with pytest.raises(InvalidFormat):
        classifier.classify(email)


@pytest.mark.unit
def test_non_string_is_invalid(classifier):
    with pytest.raises(InvalidFormat):
        classifier.classify(None)


@pytest.mark.unit
def test_every_valid_company_email_gets_a_name(classifier):
    emails = ["a@x.io", "a@q-.com", "a@_.org", "a@sub.co.uk", "a@münchen-gmbh.de"]
    for email in emails:
        name = classifier.classify(email).derived_company_name
        assert name, email


@pytest.mark.unit
def test_blocklist_is_injected():
    classifier = DomainClassifier(["acme.com"])

    assert classifier.classify("john@acme.com").is_company_domain is False
    assert classifier.classify("jane@gmail.com").is_company_domain is True


@pytest.mark.unit
def test_classify_is_deterministic(classifier):
    assert classifier.classify("john@acme.com") == classifier.classify("john@acme.com")


@pytest.mark.unit
def test_module_classify_uses_given_blocklist():
    assert classify("jane@gmail.com", ["gmail.com"]).is_company_domain is False
    assert classify("john@acme.com", ["gmail.com"]).derived_company_name == "Acme"
