"""Tests for the command-line entrypoint."""

import json

import pytest

from eml_triage import log_utils
from eml_triage.cli import _collect_eml_paths, _resolve_output_path, main

_ENV_KEYS = (
    "REDACT_EMAILS",
    "REDACT_PHONES",
    "REDACT_CREDIT_CARDS",
    "REDACT_SSN",
    "REDACT_NAMES",
    "REDACT_CUSTOM_PATTERNS",
    "REPORT_DEFANG",
    "LOG_FILE",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(log_utils, "_LOG_FILE", None)


@pytest.fixture
def phishing_path(tmp_path, phishing_bytes):
    path = tmp_path / "phish.eml"
    path.write_bytes(phishing_bytes)
    return path


class TestSingleFile:
    def test_prints_json_by_default(self, phishing_path, capsys):
        assert main(["-f", str(phishing_path)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["threat"]["level"] == "High"

    def test_json_to_default_path(self, phishing_path, capsys):
        assert main(["-f", str(phishing_path), "--json"]) == 0
        output = phishing_path.with_name("phish-report.json")
        assert json.loads(output.read_text(encoding="utf-8"))["threat"]["score"] >= 100
        assert capsys.readouterr().out == ""

    def test_json_to_explicit_path(self, phishing_path, tmp_path):
        target = tmp_path / "out.json"
        assert main(["-f", str(phishing_path), "--json", str(target)]) == 0
        assert target.exists()

    def test_markdown_and_sanitized(self, phishing_path):
        assert main(["-f", str(phishing_path), "--markdown", "--sanitized"]) == 0
        md = phishing_path.with_name("phish-report.md").read_text(encoding="utf-8")
        sanitized = phishing_path.with_name("phish-sanitized.eml").read_text(encoding="utf-8")
        assert "**Threat Level:** High" in md
        assert "123-45-6789" not in sanitized

    def test_no_defang_markdown(self, phishing_path):
        assert main(["-f", str(phishing_path), "--markdown", "--no-defang"]) == 0
        md = phishing_path.with_name("phish-report.md").read_text(encoding="utf-8")
        assert "- 185.234.72.19" in md

    def test_iocs_output(self, phishing_path, capsys):
        assert main(["-f", str(phishing_path), "--iocs"]) == 0
        out = capsys.readouterr().out
        assert "## URLs" in out
        assert "- 185[.]234[.]72[.]19" in out

    def test_redaction_flags(self, phishing_path, capsys):
        assert main(["-f", str(phishing_path), "--no-redact-ssn", "--custom-pattern", "limited"]) == 0
        data = json.loads(capsys.readouterr().out)
        text = data["redaction"]["redacted_text"]
        assert "123-45-6789" in text
        assert "has been [REDACTED-CUSTOM]!" in text

    def test_env_file_is_read(self, phishing_path, tmp_path, capsys, monkeypatch):
        monkeypatch.delenv("REDACT_EMAILS", raising=False)
        (tmp_path / ".env").write_text("REDACT_EMAILS=false\n", encoding="utf-8")
        assert main(["-f", str(phishing_path)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert "support@paypal-help.net" in data["redaction"]["redacted_text"]


class TestFailures:
    def test_unparseable_file(self, tmp_path, capsys):
        path = tmp_path / "empty.eml"
        path.write_bytes(b"")
        assert main(["-f", str(path)]) == 1
        assert "[ERROR][cli] Failed to analyze" in capsys.readouterr().err

    def test_missing_file(self, tmp_path):
        assert main(["-f", str(tmp_path / "missing.eml")]) == 1

    def test_requires_input(self):
        with pytest.raises(SystemExit) as excinfo:
            main([])
        assert excinfo.value.code == 2

    def test_log_file(self, tmp_path):
        path = tmp_path / "empty.eml"
        path.write_bytes(b"")
        log_path = tmp_path / "triage.log"
        assert main(["-f", str(path), "--log-file", str(log_path)]) == 1
        assert "Failed to analyze" in log_path.read_text(encoding="utf-8")


class TestDirectory:
    def test_directory_scan(self, tmp_path, phishing_bytes, clean_bytes, capsys):
        inbox = tmp_path / "inbox"
        inbox.mkdir()
        (inbox / "a.eml").write_bytes(phishing_bytes)
        (inbox / "b.eml").write_bytes(clean_bytes)
        (inbox / "notes.txt").write_text("not an email", encoding="utf-8")

        assert main(["-d", str(inbox), "--json"]) == 0
        output = inbox / "output"
        assert sorted(item.name for item in output.iterdir()) == [
            "a-report.json",
            "b-report.json",
        ]
        assert "[2/2] Analyzing" in capsys.readouterr().err

    def test_one_bad_file_does_not_stop_the_batch(self, tmp_path, clean_bytes):
        inbox = tmp_path / "inbox"
        inbox.mkdir()
        (inbox / "bad.eml").write_bytes(b"")
        (inbox / "good.eml").write_bytes(clean_bytes)
        assert main(["-d", str(inbox), "--json"]) == 1
        assert (inbox / "output" / "good-report.json").exists()

    def test_malformed_headers_do_not_stop_the_batch(self, tmp_path, clean_bytes):
        inbox = tmp_path / "inbox"
        inbox.mkdir()
        (inbox / "odd.eml").write_bytes(b'Message-ID: <@>\nFrom: a@\nReply-To: ""\n\nx\n')
        (inbox / "good.eml").write_bytes(clean_bytes)
        assert main(["-d", str(inbox), "--json"]) == 0
        assert (inbox / "output" / "odd-report.json").exists()
        assert (inbox / "output" / "good-report.json").exists()


class TestHelpers:
    def test_collect_recursive_with_excludes(self, tmp_path):
        nested = tmp_path / "x" / "y"
        nested.mkdir(parents=True)
        (tmp_path / "x" / "one.eml").write_text("a", encoding="utf-8")
        (nested / "two.eml").write_text("b", encoding="utf-8")
        (nested / "skip.eml").write_text("c", encoding="utf-8")
        paths = _collect_eml_paths(str(tmp_path / "x"), recursive=True, excludes=["skip*"])
        assert [p.rsplit("/", 1)[-1] for p in paths] == ["one.eml", "two.eml"]

    def test_resolve_output_path(self):
        assert _resolve_output_path("/mail/a.eml", True, "-report.md") == "/mail/a-report.md"
        assert _resolve_output_path("/mail/a.eml", "custom.md", "-report.md") == "custom.md"
        assert (
            _resolve_output_path("/mail/a.eml", True, "-report.md", "/out") == "/out/a-report.md"
        )
