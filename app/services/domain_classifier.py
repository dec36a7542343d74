"""
Domain Classifier

Decides whether an email address belongs to a company domain and derives
a display name for the company from that domain.

RULES:
1. Format: exactly one "@", non-empty local part, domain with at least
   two non-empty dot-separated labels and no whitespace.
2. Consumer domains (gmail.com, yahoo.com, ...) are rejected. Matching is
   case-insensitive and also covers subdomains (mail.yahoo.com).
3. Company name = registrable label (the label before the public suffix),
   split on "-" / "_" and title-cased: john@acme-corp.com -> "Acme Corp".
   Subdomains are ignored: mail.acme.com -> "Acme".
   A registrable label that is only a legal suffix (acme.inc.com) is
   skipped in favour of the label to its left.

Pure functions, no I/O. The block-list is injected so tests can swap it.
"""

import re
from typing import Iterable, List, Optional

from app.core.config import get_settings
from app.core.exceptions import InvalidFormat
from app.models.verification import ClassificationResult, RejectionReason


# Two-label public suffixes; the registrable label sits one further left
COMPOUND_SUFFIXES = {
    "co.uk", "org.uk", "ac.uk", "gov.uk", "ltd.uk", "plc.uk",
    "com.au", "net.au", "org.au",
    "co.in", "net.in", "org.in",
    "co.nz", "co.jp", "co.kr", "co.za",
    "com.br", "com.mx", "com.ar", "com.cn", "com.sg", "com.tr",
}

LEGAL_SUFFIXES = {
    "inc", "corp", "corporation", "ltd", "llc", "llp", "plc",
    "co", "company", "gmbh", "limited",
}

_WHITESPACE = re.compile(r"\s")
_WORD_SPLIT = re.compile(r"[-_]+")


def normalize_domain(domain: str) -> str:
    return domain.strip().rstrip(".").casefold()


def split_email(email: str) -> tuple:
    """
    Split and validate an email address.

    Returns (local_part, normalized_domain).
    Raises InvalidFormat when the address is malformed.
    """
    if not isinstance(email, str):
        raise InvalidFormat("Email address is required")

    email = email.strip()
    if not email or email.count("@") != 1 or _WHITESPACE.search(email):
        raise InvalidFormat("Please enter a valid email address")

    local, domain = email.split("@")
    domain = normalize_domain(domain)
    labels = domain.split(".")

    if not local or not domain or len(labels) < 2 or any(not label for label in labels):
        raise InvalidFormat("Please enter a valid email address")

    return local, domain


def registrable_label(domain: str) -> str:
    """Label immediately before the public suffix (acme for mail.acme.co.uk)."""
    labels = domain.split(".")
    suffix_len = 2 if len(labels) >= 3 and ".".join(labels[-2:]) in COMPOUND_SUFFIXES else 1
    index = len(labels) - suffix_len - 1

    # acme.inc.com -> skip "inc" when there is something to its left
    while index > 0 and labels[index] in LEGAL_SUFFIXES:
        index -= 1

    return labels[index]


def derive_company_name(domain: str) -> str:
    """
    Turn a company domain into a display name.

    Falls back to the raw label when nothing usable is left
    (e.g. a label made only of separators, or a punycode label).
    """
    label = registrable_label(domain)

    # IDN labels are opaque
    if label.startswith("xn--"):
        return label

    words = [word for word in _WORD_SPLIT.split(label) if word]
    name = " ".join(word.title() for word in words)
    return name or label


class DomainClassifier:
    """
    Classifies email addresses as company / consumer.

    Args:
        blocked_domains: consumer mail providers to reject
    """

    def __init__(self, blocked_domains: Iterable[str]):
        self.blocked_domains = frozenset(normalize_domain(d) for d in blocked_domains if d and d.strip())

    def is_consumer_domain(self, domain: str) -> bool:
        domain = normalize_domain(domain)
        if domain in self.blocked_domains:
            return True
        return any(domain.endswith("." + blocked) for blocked in self.blocked_domains)

    def classify(self, email: str) -> ClassificationResult:
        """
        Classify an email address.

        Raises InvalidFormat for malformed addresses; consumer domains come
        back as a negative result, not an exception.
        """
        _, domain = split_email(email)

        if self.is_consumer_domain(domain):
            return ClassificationResult(
                is_company_domain=False,
                derived_company_name=None,
                reason=RejectionReason.consumer_domain,
            )

        return ClassificationResult(
            is_company_domain=True,
            derived_company_name=derive_company_name(domain),
            reason=None,
        )


def classify(email: str, blocked_domains: Optional[List[str]] = None) -> ClassificationResult:
    """Shortcut using the configured block-list unless one is given."""
    if blocked_domains is None:
        blocked_domains = get_settings().blocked_domains
    return DomainClassifier(blocked_domains).classify(email)
