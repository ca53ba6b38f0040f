"""IP extraction helpers."""

from typing import Iterable

from .models import EmailHeader
from .patterns import IPV4_RE

# Internal relay hops (10/8, 192.168/16, 127/8, 0/8); noise for external-threat
# triage. Matched on the literal text so zero-padded octets are still reported.
_SUPPRESSED_PREFIXES = ("10.", "192.168.", "127.", "0.")


def extract_ips_from_text(text: str) -> set[str]:
    return {
        match.group(0)
        for match in IPV4_RE.finditer(text)
        if not match.group(0).startswith(_SUPPRESSED_PREFIXES)
    }


def extract_ips_from_headers(headers: Iterable[EmailHeader]) -> list[str]:
    ips: set[str] = set()
    for header in headers:
        ips.update(extract_ips_from_text(header.value))
    return sorted(ips)
