"""High-level triage orchestration."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

from .config import TriageConfig
from .eml_parser import EmlParser
from .indicators import extract_iocs
from .log_utils import log
from .models import AnalysisReport
from .redaction import RedactionOptions, redact_text
from .scoring import score_email

LOG_COMPONENT = "triage"


class TriageAnalyzer:
    def __init__(
        self,
        config: TriageConfig | None = None,
        verbose: bool = False,
        debug: bool = False,
    ) -> None:
        self._config = config or TriageConfig()
        self._verbose = verbose
        self._debug = debug

    @property
    def redaction_options(self) -> RedactionOptions:
        return self._config.redaction_options()

    def analyze_path(self, path: str) -> AnalysisReport:
        log(self._verbose, f"Reading EML from {path}", component=LOG_COMPONENT)
        with open(path, "rb") as handle:
            data = handle.read()
        return self.analyze_bytes(data)

    def analyze_bytes(self, data: bytes | str) -> AnalysisReport:
        parser = EmlParser(verbose=self._verbose, debug=self._debug)
        email = parser.parse_bytes(data)

        log(self._verbose, "Redacting body text", component=LOG_COMPONENT)
        redaction = redact_text(email.body_text, self.redaction_options, debug=self._debug)
        log(
            self._verbose,
            f"Applied {redaction.redaction_count} redaction(s)",
            component=LOG_COMPONENT,
        )

        iocs = extract_iocs(email)
        threat = score_email(email)
        log(
            self._verbose,
            f"Threat assessment: level={threat.level} score={threat.score} "
            f"indicators={len(threat.indicators)}",
            component=LOG_COMPONENT,
        )

        return AnalysisReport(
            email=email,
            redaction=redaction,
            iocs=iocs,
            threat=threat,
            analyzed_at=_utc_now(),
        )

    def report_as_dict(self, report: AnalysisReport) -> dict[str, Any]:
        return report_as_dict(report)


def report_as_dict(report: AnalysisReport) -> dict[str, Any]:
    return asdict(report)


def _utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
