"""Shared regular expressions and heuristic tables."""

import re


URL_RE = re.compile(r"https?://[^\s<>\"')}\]>]+", re.IGNORECASE)
URL_TRAILING_CHARS = ".,)]>;"

HREF_SCHEME_PREFIX = "http"

EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")

IPV4_RE = re.compile(
    r"\b(?:(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\.){3}"
    r"(?:25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\b"
)

DOMAIN_RE = re.compile(
    r"(?:[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?\.)+[a-zA-Z]{2,}"
)

# Tokens shaped like domains that are really file names.
NON_DOMAIN_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".bmp", ".svg", ".ico", ".css")

HTML_TAG_RE = re.compile(r"<[^>]+>")
WHITESPACE_RE = re.compile(r"\s+")

DISPOSITION_FILENAME_RE = re.compile(r"filename=\"?([^\";\s]+)\"?")

# Redaction
PHONE_RE = re.compile(
    r"(?:\+?1[-.\s]?)?\(?[0-9]{3}\)?[-.\s]?[0-9]{3}[-.\s]?[0-9]{4}"
)
CREDIT_CARD_RE = re.compile(
    r"\b(?:4[0-9]{12}(?:[0-9]{3})?|5[1-5][0-9]{14}|3[47][0-9]{13}"
    r"|6(?:011|5[0-9]{2})[0-9]{12})\b"
)
SSN_RE = re.compile(r"\b[0-9]{3}[-\s]?[0-9]{2}[-\s]?[0-9]{4}\b")
GREETING_NAME_RE = re.compile(
    r"\b(?i:dear|hello|hi|hey)\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)?)"
)

# Scoring
URGENCY_PATTERNS = (
    re.compile(r"\b(urgent|immediately|asap|right away|act now|limited time)\b", re.IGNORECASE),
    re.compile(r"\b(expire|suspend|terminate|deactivate|close your account)\b", re.IGNORECASE),
    re.compile(r"\b(within 24 hours|within 48 hours|today only)\b", re.IGNORECASE),
    re.compile(r"\b(final notice|last warning|immediate action required)\b", re.IGNORECASE),
)

CREDENTIAL_PATTERNS = (
    re.compile(
        r"\b(verify your|confirm your|update your)\s+(account|password|credentials|identity)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(login|sign in|log in)\s+(here|now|to)\b", re.IGNORECASE),
    re.compile(
        r"\b(enter your|provide your)\s+(password|credentials|ssn|social security)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(click here to|click the link|click below)\b", re.IGNORECASE),
)

IMPERSONATION_PATTERNS = (
    re.compile(
        r"\b(paypal|microsoft|apple|amazon|netflix|bank of|wells fargo|chase)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(security team|support team|customer service|help desk)\b", re.IGNORECASE),
    re.compile(r"\b(official|authorized|verified)\b", re.IGNORECASE),
)

URL_SHORTENERS = (
    "bit.ly",
    "tinyurl.com",
    "goo.gl",
    "t.co",
    "ow.ly",
    "is.gd",
    "buff.ly",
    "adf.ly",
    "bit.do",
    "mcaf.ee",
    "su.pr",
    "tiny.cc",
)

DANGEROUS_EXTENSIONS = frozenset({"exe", "scr", "bat", "cmd", "ps1", "vbs", "js", "jar", "msi"})
ARCHIVE_EXTENSIONS = frozenset({"zip", "rar", "7z", "iso", "img"})
