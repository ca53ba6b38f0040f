"""Configuration helpers for EML Triage."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from .redaction import RedactionOptions

CUSTOM_PATTERN_SEPARATOR = ";;"


@dataclass(frozen=True)
class TriageConfig:
    redact_emails: bool = True
    redact_phones: bool = True
    redact_credit_cards: bool = True
    redact_ssn: bool = True
    redact_names: bool = True
    custom_patterns: tuple[str, ...] = field(default_factory=tuple)
    report_defang: bool = True
    log_file: str | None = None

    @staticmethod
    def from_env(env_path: str = ".env") -> "TriageConfig":
        _load_dotenv(env_path)
        return TriageConfig(
            redact_emails=_parse_bool(os.getenv("REDACT_EMAILS"), True),
            redact_phones=_parse_bool(os.getenv("REDACT_PHONES"), True),
            redact_credit_cards=_parse_bool(os.getenv("REDACT_CREDIT_CARDS"), True),
            redact_ssn=_parse_bool(os.getenv("REDACT_SSN"), True),
            redact_names=_parse_bool(os.getenv("REDACT_NAMES"), True),
            custom_patterns=_parse_patterns(os.getenv("REDACT_CUSTOM_PATTERNS")),
            report_defang=_parse_bool(os.getenv("REPORT_DEFANG"), True),
            log_file=os.getenv("LOG_FILE") or None,
        )

    def redaction_options(self) -> RedactionOptions:
        return RedactionOptions(
            redact_emails=self.redact_emails,
            redact_phones=self.redact_phones,
            redact_credit_cards=self.redact_credit_cards,
            redact_ssn=self.redact_ssn,
            redact_names=self.redact_names,
            custom_patterns=list(self.custom_patterns),
        )


def _parse_bool(raw: str | None, default: bool) -> bool:
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _parse_patterns(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(item for item in raw.split(CUSTOM_PATTERN_SEPARATOR) if item.strip())


def _load_dotenv(env_path: str) -> None:
    path = Path(env_path)
    if not path.exists():
        return
    try:
        content = path.read_text(encoding="utf-8")
    except OSError:
        return

    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value
