"""Data models for triage results."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EmailHeader:
    name: str
    value: str


@dataclass(frozen=True)
class Attachment:
    filename: str
    content_type: str
    size: int
    sha256: str
    md5: str | None = None
    sha1: str | None = None


@dataclass(frozen=True)
class AuthenticationResult:
    """Authentication evidence as reported by upstream mail servers.

    ``spf``, ``dkim`` and ``dmarc`` keep the raw header values the statuses
    were read from (Received-SPF, DKIM-Signature, Authentication-Results).
    """

    spf: str | None = None
    dkim: str | None = None
    dmarc: str | None = None
    spf_status: str = "unknown"
    dkim_status: str = "unknown"
    dmarc_status: str = "unknown"


@dataclass(frozen=True)
class StructuredEmail:
    id: str
    subject: str
    from_addr: str
    to: str
    reply_to: str | None
    return_path: str | None
    date: str | None
    headers: tuple[EmailHeader, ...]
    body_text: str
    body_html: str
    urls: tuple[str, ...]
    domains: tuple[str, ...]
    ip_addresses: tuple[str, ...]
    email_addresses: tuple[str, ...]
    attachments: tuple[Attachment, ...]
    authentication: AuthenticationResult
    raw_content: str

    def header_values(self, name: str) -> list[str]:
        wanted = name.lower()
        return [item.value for item in self.headers if item.name.lower() == wanted]


@dataclass
class FileHash:
    filename: str
    sha256: str


@dataclass
class HeaderOfInterest:
    name: str
    value: str
    reason: str


@dataclass
class IocReport:
    domains: list[str] = field(default_factory=list)
    urls: list[str] = field(default_factory=list)
    ip_addresses: list[str] = field(default_factory=list)
    email_addresses: list[str] = field(default_factory=list)
    file_hashes: list[FileHash] = field(default_factory=list)
    headers_of_interest: list[HeaderOfInterest] = field(default_factory=list)


@dataclass
class Redaction:
    original: str
    redacted: str
    redaction_type: str
    start: int
    end: int


@dataclass
class RedactionResult:
    redacted_text: str = ""
    redaction_count: int = 0
    redactions: list[Redaction] = field(default_factory=list)


@dataclass
class ThreatIndicator:
    category: str
    description: str
    severity: str
    details: str | None = None


@dataclass
class ThreatAssessment:
    level: str
    score: int
    indicators: list[ThreatIndicator] = field(default_factory=list)
    summary: str = ""


@dataclass
class AnalysisReport:
    email: StructuredEmail
    redaction: RedactionResult
    iocs: IocReport
    threat: ThreatAssessment
    analyzed_at: str
