"""Report rendering helpers."""

from __future__ import annotations

import json

from .analyzer import report_as_dict
from .indicators import format_iocs_for_copy
from .models import AnalysisReport, IocReport

_SEVERITY_TAGS = {"high": "[HIGH]", "medium": "[MEDIUM]", "low": "[LOW]"}


def report_to_json(report: AnalysisReport, indent: int = 2) -> str:
    return json.dumps(report_as_dict(report), indent=indent)


def build_markdown_report(report: AnalysisReport, defang: bool = True) -> str:
    email = report.email
    auth = email.authentication
    threat = report.threat
    parts: list[str] = []

    parts.append(f"# {email.subject or '(no subject)'} Analysis")
    parts.append("")
    parts.append(f"**Analysis Date:** {report.analyzed_at}")
    parts.append(f"**Threat Level:** {threat.level} (score {threat.score})")
    parts.append(f"**Fingerprint:** {email.id}")
    parts.append("")
    parts.append("## Summary")
    parts.append("")
    parts.append(threat.summary)
    parts.append("")
    parts.append("## Email Details")
    parts.append("")
    parts.extend(
        _table(
            ("Field", "Value"),
            [
                ("From", email.from_addr),
                ("To", email.to),
                ("Subject", email.subject),
                ("Date", email.date or "Unknown"),
                ("Reply-To", email.reply_to or "Not specified"),
                ("Return-Path", email.return_path or "Not specified"),
            ],
        )
    )
    parts.append("")
    parts.append("## Authentication Results")
    parts.append("")
    parts.extend(
        _table(
            ("Check", "Status"),
            [
                ("SPF", auth.spf_status.upper()),
                ("DKIM", auth.dkim_status.upper()),
                ("DMARC", auth.dmarc_status.upper()),
            ],
        )
    )
    parts.append("")

    if threat.indicators:
        parts.append("## Threat Indicators")
        parts.append("")
        for indicator in threat.indicators:
            tag = _SEVERITY_TAGS.get(indicator.severity, f"[{indicator.severity.upper()}]")
            parts.append(f"- {tag} **{indicator.category}**: {indicator.description}")
            if indicator.details:
                parts.append(f"  - {indicator.details}")
        parts.append("")

    if email.attachments:
        parts.append("## Attachments")
        parts.append("")
        parts.extend(
            _table(
                ("Filename", "Content-Type", "Size", "SHA256"),
                [
                    (item.filename, item.content_type, str(item.size), item.sha256)
                    for item in email.attachments
                ],
            )
        )
        parts.append("")

    parts.append("## Indicators of Compromise")
    parts.append("")
    iocs = report.iocs
    if not defang:
        iocs = _raw_iocs(report)
    ioc_text = format_iocs_for_copy(iocs).replace("## ", "### ")
    if ioc_text:
        parts.append(ioc_text.rstrip("\n"))
        parts.append("")

    parts.append("## Email Body (Redacted)")
    parts.append("")
    parts.append("```")
    parts.append(report.redaction.redacted_text)
    parts.append("```")
    parts.append("")
    return "\n".join(parts)


def export_sanitized_eml(report: AnalysisReport) -> str:
    """Apply every logged substitution to the raw message text.

    This is plain find/replace on ``original`` strings; the logged offsets
    are not used.
    """
    sanitized = report.email.raw_content
    for redaction in report.redaction.redactions:
        sanitized = sanitized.replace(redaction.original, redaction.redacted)
    return sanitized


def _raw_iocs(report: AnalysisReport) -> IocReport:
    email = report.email
    return IocReport(
        domains=list(email.domains),
        urls=list(email.urls),
        ip_addresses=list(email.ip_addresses),
        email_addresses=list(email.email_addresses),
        file_hashes=report.iocs.file_hashes,
        headers_of_interest=report.iocs.headers_of_interest,
    )


def _table(headers: tuple[str, ...], rows: list[tuple[str, ...]]) -> list[str]:
    lines = [
        "| " + " | ".join(headers) + " |",
        "|" + "|".join("-" * (len(item) + 2) for item in headers) + "|",
    ]
    for row in rows:
        lines.append("| " + " | ".join(_cell(value) for value in row) + " |")
    return lines


def _cell(value: str) -> str:
    return str(value).replace("|", "\\|").replace("\n", " ")
