"""Indicator of compromise extraction and defanging."""

from __future__ import annotations

from typing import Iterable

from .models import EmailHeader, FileHash, HeaderOfInterest, IocReport, StructuredEmail
from .patterns import EMAIL_RE
from .url_utils import defang_url

MAX_RECEIVED_OF_INTEREST = 3


def defang_domain(domain: str) -> str:
    return domain.replace(".", "[.]")


def defang_email(address: str) -> str:
    return address.replace("@", "[@]").replace(".", "[.]")


def defang_ip(ip: str) -> str:
    return ip.replace(".", "[.]")


def extract_email_addresses(text: str, headers: Iterable[EmailHeader]) -> list[str]:
    addresses = {match.group(0).lower() for match in EMAIL_RE.finditer(text)}
    for header in headers:
        addresses.update(match.group(0).lower() for match in EMAIL_RE.finditer(header.value))
    return sorted(addresses)


def file_hashes(email: StructuredEmail) -> list[FileHash]:
    return [FileHash(filename=item.filename, sha256=item.sha256) for item in email.attachments]


def headers_of_interest(email: StructuredEmail) -> list[HeaderOfInterest]:
    """Headers an analyst should look at first.

    Routing headers are capped so a long relay chain does not bury the
    sender-mismatch and authentication findings that follow them.
    """
    findings: list[HeaderOfInterest] = []
    received_count = 0

    for header in email.headers:
        name = header.name.lower()
        if name == "x-originating-ip":
            findings.append(
                HeaderOfInterest(header.name, header.value, "Source IP of the email sender")
            )
        elif name == "x-mailer":
            findings.append(
                HeaderOfInterest(header.name, header.value, "Email client used to send the message")
            )
        elif name == "received" and "from" in header.value.lower():
            if received_count < MAX_RECEIVED_OF_INTEREST:
                received_count += 1
                findings.append(
                    HeaderOfInterest(header.name, header.value, "Email routing information")
                )

    from_addr = email.from_addr
    return_path = email.return_path or ""
    if from_addr and return_path and return_path not in from_addr and from_addr not in return_path:
        findings.append(
            HeaderOfInterest(
                "Return-Path Mismatch",
                f"From: {from_addr} | Return-Path: {return_path}",
                "Return-Path does not match From address - possible spoofing",
            )
        )

    reply_to = email.reply_to or ""
    if reply_to and reply_to not in from_addr:
        findings.append(
            HeaderOfInterest(
                "Reply-To Mismatch",
                f"From: {from_addr} | Reply-To: {reply_to}",
                "Reply-To does not match From address - possible redirect",
            )
        )

    auth = email.authentication
    findings.append(HeaderOfInterest("SPF", auth.spf_status, "SPF validation result"))
    findings.append(HeaderOfInterest("DKIM", auth.dkim_status, "DKIM validation result"))
    findings.append(HeaderOfInterest("DMARC", auth.dmarc_status, "DMARC validation result"))
    return findings


def extract_iocs(email: StructuredEmail) -> IocReport:
    return IocReport(
        domains=[defang_domain(item) for item in email.domains],
        urls=[defang_url(item) for item in email.urls],
        ip_addresses=[defang_ip(item) for item in email.ip_addresses],
        email_addresses=[defang_email(item) for item in email.email_addresses],
        file_hashes=file_hashes(email),
        headers_of_interest=headers_of_interest(email),
    )


def format_iocs_for_copy(report: IocReport) -> str:
    sections: list[str] = []
    for title, items in (
        ("Domains", report.domains),
        ("URLs", report.urls),
        ("IP Addresses", report.ip_addresses),
        ("Email Addresses", report.email_addresses),
    ):
        if items:
            lines = [f"## {title}"] + [f"- {item}" for item in items]
            sections.append("\n".join(lines) + "\n")

    if report.file_hashes:
        lines = ["## File Hashes"]
        lines.extend(f"- {item.filename}: SHA256: {item.sha256}" for item in report.file_hashes)
        sections.append("\n".join(lines) + "\n")

    if report.headers_of_interest:
        lines = ["## Headers of Interest"]
        lines.extend(f"- {item.name}: {item.value}" for item in report.headers_of_interest)
        sections.append("\n".join(lines) + "\n")

    return "\n".join(sections)
