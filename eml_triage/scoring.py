"""Heuristic threat scoring.

Every rule is evaluated independently and can only add to the score. The
evidence list keeps rule evaluation order.
"""

from __future__ import annotations

from .models import StructuredEmail, ThreatAssessment, ThreatIndicator
from .patterns import (
    ARCHIVE_EXTENSIONS,
    CREDENTIAL_PATTERNS,
    DANGEROUS_EXTENSIONS,
    IMPERSONATION_PATTERNS,
    URGENCY_PATTERNS,
    URL_SHORTENERS,
)
from .url_utils import url_host

LEVEL_HIGH = "High"
LEVEL_MEDIUM = "Medium"
LEVEL_LOW = "Low"

HIGH_THRESHOLD = 50
MEDIUM_THRESHOLD = 25

SCORE_SPF_FAIL = 25
SCORE_SPF_SOFTFAIL = 10
SCORE_DKIM_FAIL = 25
SCORE_DMARC_FAIL = 25
SCORE_RETURN_PATH_MISMATCH = 15
SCORE_REPLY_TO_MISMATCH = 15
SCORE_URGENCY = 10
SCORE_CREDENTIAL = 20
SCORE_IMPERSONATION = 15
SCORE_SHORTENER = 10
SCORE_EXTERNAL_LINK = 5
SCORE_DANGEROUS_ATTACHMENT = 30
SCORE_ARCHIVE_ATTACHMENT = 10

SUMMARIES = {
    LEVEL_HIGH: "This email shows multiple high-risk indicators consistent with phishing or malicious intent.",
    LEVEL_MEDIUM: "This email shows some suspicious characteristics that warrant caution.",
    LEVEL_LOW: "This email shows minimal suspicious indicators but should still be verified.",
}


def score_email(email: StructuredEmail) -> ThreatAssessment:
    indicators: list[ThreatIndicator] = []
    score = 0

    score += _score_authentication(email, indicators)
    score += _score_sender_headers(email, indicators)
    score += _score_content(email, indicators)
    score += _score_urls(email, indicators)
    score += _score_attachments(email, indicators)

    level = level_from_score(score)
    return ThreatAssessment(
        level=level,
        score=score,
        indicators=indicators,
        summary=SUMMARIES[level],
    )


def level_from_score(score: int) -> str:
    if score >= HIGH_THRESHOLD:
        return LEVEL_HIGH
    if score >= MEDIUM_THRESHOLD:
        return LEVEL_MEDIUM
    return LEVEL_LOW


def _score_authentication(email: StructuredEmail, indicators: list[ThreatIndicator]) -> int:
    auth = email.authentication
    score = 0
    if auth.spf_status == "fail":
        score += SCORE_SPF_FAIL
        indicators.append(
            ThreatIndicator(
                category="Authentication",
                description="SPF check failed",
                severity="high",
                details="The sender's domain did not authorize this server to send emails on its behalf.",
            )
        )
    elif auth.spf_status == "softfail":
        score += SCORE_SPF_SOFTFAIL
        indicators.append(
            ThreatIndicator(
                category="Authentication",
                description="SPF soft fail",
                severity="medium",
                details="The sender's SPF policy indicates this server may not be authorized.",
            )
        )

    if auth.dkim_status == "fail":
        score += SCORE_DKIM_FAIL
        indicators.append(
            ThreatIndicator(
                category="Authentication",
                description="DKIM verification failed",
                severity="high",
                details="The email's DKIM signature could not be verified.",
            )
        )

    if auth.dmarc_status == "fail":
        score += SCORE_DMARC_FAIL
        indicators.append(
            ThreatIndicator(
                category="Authentication",
                description="DMARC check failed",
                severity="high",
                details="The email failed DMARC policy validation.",
            )
        )
    return score


def _score_sender_headers(email: StructuredEmail, indicators: list[ThreatIndicator]) -> int:
    score = 0
    from_lower = email.from_addr.lower()

    return_path = email.return_path or ""
    return_lower = return_path.lower()
    if return_path and return_lower not in from_lower and from_lower not in return_lower:
        score += SCORE_RETURN_PATH_MISMATCH
        indicators.append(
            ThreatIndicator(
                category="Header Anomaly",
                description="Return-Path mismatch",
                severity="medium",
                details=f"From: {email.from_addr} differs from Return-Path: {return_path}",
            )
        )

    reply_to = email.reply_to or ""
    if reply_to and reply_to.lower() not in from_lower:
        score += SCORE_REPLY_TO_MISMATCH
        indicators.append(
            ThreatIndicator(
                category="Header Anomaly",
                description="Reply-To mismatch",
                severity="medium",
                details=f"Replies would go to {reply_to} instead of {email.from_addr}",
            )
        )
    return score


def _score_content(email: StructuredEmail, indicators: list[ThreatIndicator]) -> int:
    score = 0
    combined = f"{email.subject} {email.body_text} {email.body_html}"

    if any(pattern.search(combined) for pattern in URGENCY_PATTERNS):
        score += SCORE_URGENCY
        indicators.append(
            ThreatIndicator(
                category="Social Engineering",
                description="Urgency language detected",
                severity="medium",
                details="The email uses urgent or pressure tactics common in phishing.",
            )
        )

    if any(pattern.search(combined) for pattern in CREDENTIAL_PATTERNS):
        score += SCORE_CREDENTIAL
        indicators.append(
            ThreatIndicator(
                category="Credential Harvesting",
                description="Credential request detected",
                severity="high",
                details="The email contains language requesting login or personal information.",
            )
        )

    from_lower = email.from_addr.lower()
    for pattern in IMPERSONATION_PATTERNS:
        match = pattern.search(combined)
        if not match:
            continue
        brand = match.group(0).lower()
        if brand in from_lower:
            continue
        score += SCORE_IMPERSONATION
        indicators.append(
            ThreatIndicator(
                category="Impersonation",
                description=f"Possible {brand} impersonation",
                severity="high",
                details=f"Email mentions {brand} but sender domain doesn't match.",
            )
        )
        break
    return score


def _score_urls(email: StructuredEmail, indicators: list[ThreatIndicator]) -> int:
    score = 0
    for url in email.urls:
        host = (url_host(url) or "").lower()
        shortener = _matching_shortener(host)
        if shortener:
            score += SCORE_SHORTENER
            indicators.append(
                ThreatIndicator(
                    category="Suspicious URL",
                    description="URL shortener detected",
                    severity="medium",
                    details=f"URL shortener used: {shortener} (may hide malicious destination)",
                )
            )
            break

    from_domain = sender_domain(email.from_addr)
    if from_domain:
        for url in email.urls:
            host = url_host(url)
            if not host:
                continue
            if from_domain in host or host in from_domain:
                continue
            score += SCORE_EXTERNAL_LINK
            indicators.append(
                ThreatIndicator(
                    category="Suspicious URL",
                    description="External domain in links",
                    severity="low",
                    details=f"Link points to {host} which differs from sender domain",
                )
            )
            break
    return score


def _score_attachments(email: StructuredEmail, indicators: list[ThreatIndicator]) -> int:
    score = 0
    for attachment in email.attachments:
        extension = attachment_extension(attachment.filename)
        if extension in DANGEROUS_EXTENSIONS:
            score += SCORE_DANGEROUS_ATTACHMENT
            indicators.append(
                ThreatIndicator(
                    category="Malicious Attachment",
                    description=f"Dangerous file type: .{extension}",
                    severity="high",
                    details=f"Attachment '{attachment.filename}' is an executable file type",
                )
            )
        elif extension in ARCHIVE_EXTENSIONS:
            score += SCORE_ARCHIVE_ATTACHMENT
            indicators.append(
                ThreatIndicator(
                    category="Suspicious Attachment",
                    description=f"Archive file type: .{extension}",
                    severity="medium",
                    details=f"Attachment '{attachment.filename}' is an archive that may contain malware",
                )
            )
    return score


def sender_domain(from_addr: str) -> str:
    """Everything after the last "@" in From, without a closing bracket."""
    if "@" not in from_addr:
        return ""
    return from_addr.rsplit("@", 1)[-1].strip().rstrip(">").strip().lower()


def attachment_extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower()


def _matching_shortener(host: str) -> str | None:
    if not host:
        return None
    for shortener in URL_SHORTENERS:
        if shortener in host:
            return shortener
    return None
