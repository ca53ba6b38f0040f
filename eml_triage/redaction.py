"""PII redaction with a substitution log.

Categories run in a fixed order (emails, phones, credit cards, SSNs,
greeting names, then custom patterns in the order given). Every category
scans the text as left by the categories before it, so an earlier
replacement can never be matched again by a later pattern.

The ``start``/``end`` recorded for each substitution are offsets into the
text as it stood when that category's pass began. Once an earlier category
has changed the text length they no longer line up with the original input
or with the final output; consumers that need positions should search for
``original`` themselves.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable

from .log_utils import log_debug
from .models import Redaction, RedactionResult
from .patterns import CREDIT_CARD_RE, EMAIL_RE, GREETING_NAME_RE, PHONE_RE, SSN_RE

PHONE_TOKEN = "[REDACTED-PHONE]"
CREDIT_CARD_TOKEN = "[REDACTED-CC]"
SSN_TOKEN = "[REDACTED-SSN]"
NAME_TOKEN = "[REDACTED-NAME]"
CUSTOM_TOKEN = "[REDACTED-CUSTOM]"
EMAIL_FALLBACK_TOKEN = "[REDACTED-EMAIL]"

LOG_COMPONENT = "redact"


@dataclass
class RedactionOptions:
    redact_emails: bool = True
    redact_phones: bool = True
    redact_credit_cards: bool = True
    redact_ssn: bool = True
    redact_names: bool = True
    custom_patterns: list[str] = field(default_factory=list)

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "RedactionOptions":
        return RedactionOptions(
            redact_emails=bool(data.get("redact_emails", False)),
            redact_phones=bool(data.get("redact_phones", False)),
            redact_credit_cards=bool(data.get("redact_credit_cards", False)),
            redact_ssn=bool(data.get("redact_ssn", False)),
            redact_names=bool(data.get("redact_names", False)),
            custom_patterns=[str(item) for item in data.get("custom_patterns") or []],
        )


def default_options() -> RedactionOptions:
    return RedactionOptions()


def redact_text(text: str, options: RedactionOptions, debug: bool = False) -> RedactionResult:
    result = text
    redactions: list[Redaction] = []

    passes: list[tuple[bool, re.Pattern[str], str, Callable[[str], str], int]] = [
        (options.redact_emails, EMAIL_RE, "email", _email_replacement, 0),
        (options.redact_phones, PHONE_RE, "phone", lambda _: PHONE_TOKEN, 0),
        (options.redact_credit_cards, CREDIT_CARD_RE, "credit_card", lambda _: CREDIT_CARD_TOKEN, 0),
        (options.redact_ssn, SSN_RE, "ssn", lambda _: SSN_TOKEN, 0),
        (options.redact_names, GREETING_NAME_RE, "name", lambda _: NAME_TOKEN, 1),
    ]
    for enabled, pattern, redaction_type, replacement, group in passes:
        if not enabled:
            continue
        result, entries = _redact_pass(result, pattern, redaction_type, replacement, group)
        log_debug(
            debug,
            f"Redaction pass {redaction_type}: {len(entries)} match(es)",
            component=LOG_COMPONENT,
        )
        redactions.extend(entries)

    for raw_pattern in options.custom_patterns:
        try:
            pattern = re.compile(raw_pattern)
        except re.error as exc:
            log_debug(
                debug,
                f"Skipping invalid custom pattern {raw_pattern!r}: {exc}",
                component=LOG_COMPONENT,
            )
            continue
        result, entries = _redact_pass(result, pattern, "custom", lambda _: CUSTOM_TOKEN, 0)
        log_debug(
            debug,
            f"Redaction pass custom {raw_pattern!r}: {len(entries)} match(es)",
            component=LOG_COMPONENT,
        )
        redactions.extend(entries)

    return RedactionResult(
        redacted_text=result,
        redaction_count=len(redactions),
        redactions=redactions,
    )


def _redact_pass(
    text: str,
    pattern: re.Pattern[str],
    redaction_type: str,
    replacement: Callable[[str], str],
    group: int,
) -> tuple[str, list[Redaction]]:
    result = text
    entries: list[Redaction] = []
    # Shift between positions in `text` and in `result`, for this pass only.
    offset = 0
    for match in pattern.finditer(text):
        start, end = match.span(group)
        if start < 0 or start == end:
            continue
        original = match.group(group)
        redacted = replacement(original)
        result = result[: start + offset] + redacted + result[end + offset :]
        offset += len(redacted) - len(original)
        entries.append(
            Redaction(
                original=original,
                redacted=redacted,
                redaction_type=redaction_type,
                start=start,
                end=end,
            )
        )
    return result, entries


def _email_replacement(original: str) -> str:
    parts = original.split("@")
    if len(parts) == 2:
        return f"[REDACTED]@{parts[1]}"
    return EMAIL_FALLBACK_TOKEN
