"""EML parsing into a structured email."""

from __future__ import annotations

import email
from email import errors, policy
from email.message import Message
from email.utils import collapse_rfc2231_value

from .errors import ParseError
from .hashing import fingerprint, hash_bytes
from .indicators import extract_email_addresses
from .ip_utils import extract_ips_from_headers
from .log_utils import log, log_debug
from .models import Attachment, AuthenticationResult, EmailHeader, StructuredEmail
from .patterns import DISPOSITION_FILENAME_RE, HTML_TAG_RE, WHITESPACE_RE
from .url_utils import extract_domains, extract_urls

LOG_COMPONENT = "parser"
UNKNOWN_FILENAME = "unknown"

# Raised by the structured header parser on malformed address or id headers.
_HEADER_PARSE_ERRORS = (IndexError, ValueError, errors.HeaderParseError)

# Defects that mean the message structure itself could not be recovered.
_FATAL_DEFECTS = (
    errors.MissingHeaderBodySeparatorDefect,
    errors.NoBoundaryInMultipartDefect,
)


class EmlParser:
    def __init__(self, verbose: bool = False, debug: bool = False) -> None:
        self._verbose = verbose
        self._debug = debug

    def parse_bytes(self, data: bytes | str) -> StructuredEmail:
        if isinstance(data, str):
            data = data.encode("utf-8")
        if not isinstance(data, (bytes, bytearray)):
            raise ParseError(f"Expected raw message bytes, got {type(data).__name__}")
        data = bytes(data)
        if not data.strip():
            raise ParseError("Empty message")

        log(self._verbose, f"Parsing EML bytes (size={len(data)})", component=LOG_COMPONENT)
        msg = email.message_from_bytes(data, policy=policy.default)
        _check_structure(msg)

        headers = tuple(
            EmailHeader(name=name, value=_header_text(msg, name, value))
            for name, value in msg.raw_items()
        )
        log_debug(self._debug, f"Parsed {len(headers)} headers", component=LOG_COMPONENT)

        bodies = {"text": "", "html": ""}
        attachments: list[Attachment] = []
        self._walk(msg, bodies, attachments)

        body_text = bodies["text"]
        body_html = bodies["html"]
        if not body_text and body_html:
            body_text = strip_html(body_html)

        authentication = parse_authentication_results(msg)
        log(
            self._verbose,
            "Authentication: "
            f"spf={authentication.spf_status} dkim={authentication.dkim_status} "
            f"dmarc={authentication.dmarc_status}",
            component=LOG_COMPONENT,
        )

        urls = extract_urls(body_text, body_html)
        structured = StructuredEmail(
            id=fingerprint(data),
            subject=_first_header(msg, "Subject") or "",
            from_addr=_first_header(msg, "From") or "",
            to=_first_header(msg, "To") or "",
            reply_to=_first_header(msg, "Reply-To"),
            return_path=_first_header(msg, "Return-Path"),
            date=_first_header(msg, "Date"),
            headers=headers,
            body_text=body_text,
            body_html=body_html,
            urls=tuple(urls),
            domains=tuple(extract_domains(urls, body_text)),
            ip_addresses=tuple(extract_ips_from_headers(headers)),
            email_addresses=tuple(extract_email_addresses(body_text, headers)),
            attachments=tuple(attachments),
            authentication=authentication,
            raw_content=data.decode("utf-8", errors="replace"),
        )
        log(
            self._verbose,
            f"Email {structured.id}: {len(structured.urls)} urls, "
            f"{len(structured.domains)} domains, {len(structured.ip_addresses)} ips, "
            f"{len(structured.attachments)} attachments",
            component=LOG_COMPONENT,
        )
        return structured

    def _walk(self, part: Message, bodies: dict[str, str], attachments: list[Attachment]) -> None:
        content_type = part.get_content_type()
        if content_type.startswith("multipart/"):
            for child in part.iter_parts():
                self._walk(child, bodies, attachments)
            return

        disposition = _first_header(part, "Content-Disposition") or ""
        log(
            self._verbose,
            f"Part content_type={content_type} disposition={disposition or None}",
            component=LOG_COMPONENT,
        )

        # Only the last text/plain and text/html leaves are kept.
        if content_type == "text/plain":
            bodies["text"] = _part_text(part)
        elif content_type == "text/html":
            bodies["html"] = _part_text(part)

        if "attachment" in disposition.lower() or not content_type.startswith("text/"):
            attachments.append(self._build_attachment(part, content_type, disposition))

    def _build_attachment(self, part: Message, content_type: str, disposition: str) -> Attachment:
        payload = _part_bytes(part)
        hashes = hash_bytes(payload)
        filename = _attachment_filename(part, disposition)
        log(
            self._verbose,
            f"Attachment: {filename} type={content_type} size={hashes.size}",
            component=LOG_COMPONENT,
        )
        return Attachment(
            filename=filename,
            content_type=content_type,
            size=hashes.size,
            sha256=hashes.sha256,
            md5=hashes.md5,
            sha1=hashes.sha1,
        )


def build_email(data: bytes | str, verbose: bool = False) -> StructuredEmail:
    return EmlParser(verbose=verbose).parse_bytes(data)


def parse_authentication_results(msg: Message) -> AuthenticationResult:
    """Read SPF/DKIM/DMARC outcomes from headers added by upstream servers.

    Nothing is re-verified. Statuses come from case-insensitive substring
    checks, so the check order matters: a ``Received-SPF: softfail`` value
    also contains ``fail`` and reads as a hard fail.
    """
    auth_results = _first_header(msg, "Authentication-Results") or ""
    received_spf = _first_header(msg, "Received-SPF") or ""
    dkim_signature = _first_header(msg, "DKIM-Signature")

    auth_lower = auth_results.lower()
    spf_lower = received_spf.lower()

    if "spf=pass" in auth_lower or "pass" in spf_lower:
        spf_status = "pass"
    elif "spf=fail" in auth_lower or "fail" in spf_lower:
        spf_status = "fail"
    elif "spf=softfail" in auth_lower or "softfail" in spf_lower:
        spf_status = "softfail"
    elif "spf=neutral" in auth_lower or "neutral" in spf_lower:
        spf_status = "neutral"
    else:
        spf_status = "unknown"

    if "dkim=pass" in auth_lower:
        dkim_status = "pass"
    elif "dkim=fail" in auth_lower:
        dkim_status = "fail"
    elif dkim_signature is not None:
        dkim_status = "present"
    else:
        dkim_status = "unknown"

    if "dmarc=pass" in auth_lower:
        dmarc_status = "pass"
    elif "dmarc=fail" in auth_lower:
        dmarc_status = "fail"
    elif "dmarc=none" in auth_lower:
        dmarc_status = "none"
    else:
        dmarc_status = "unknown"

    return AuthenticationResult(
        spf=received_spf or None,
        dkim=dkim_signature,
        dmarc=auth_results or None,
        spf_status=spf_status,
        dkim_status=dkim_status,
        dmarc_status=dmarc_status,
    )


def strip_html(html: str) -> str:
    text = HTML_TAG_RE.sub(" ", html)
    return WHITESPACE_RE.sub(" ", text).strip()


def _check_structure(msg: Message) -> None:
    for defect in msg.defects:
        if isinstance(defect, _FATAL_DEFECTS):
            raise ParseError(f"Malformed message structure: {type(defect).__name__}")


def _first_header(msg: Message, name: str) -> str | None:
    wanted = name.lower()
    for key, value in msg.raw_items():
        if key.lower() == wanted:
            return _header_text(msg, key, value)
    return None


def _header_text(msg: Message, name: str, raw_value: str) -> str:
    """Decoded header value, or the unfolded source text when it will not parse."""
    try:
        return str(msg.policy.header_fetch_parse(name, raw_value))
    except _HEADER_PARSE_ERRORS:
        return "".join(raw_value.splitlines())


def _part_text(part: Message) -> str:
    try:
        text = part.get_content()
    except (LookupError, UnicodeDecodeError):
        raw = part.get_payload(decode=True) or b""
        text = raw.decode("utf-8", errors="replace")
    return text


def _part_bytes(part: Message) -> bytes:
    payload = part.get_payload(decode=True)
    if payload is not None:
        return payload
    # message/rfc822 leaves carry a parsed message rather than bytes.
    inner = part.get_payload()
    if isinstance(inner, list):
        return b"".join(item.as_bytes() for item in inner)
    if isinstance(inner, str):
        return inner.encode("utf-8", errors="replace")
    return b""


def _attachment_filename(part: Message, disposition: str) -> str:
    name = part.get_param("name")
    if name:
        return collapse_rfc2231_value(name)
    match = DISPOSITION_FILENAME_RE.search(disposition)
    if match:
        return match.group(1)
    return UNKNOWN_FILENAME
