"""Command-line entrypoint for EML triage."""

import argparse
import dataclasses
import fnmatch
import os
import sys
import time

from .analyzer import TriageAnalyzer
from .config import TriageConfig
from .errors import ParseError
from .indicators import format_iocs_for_copy
from .log_utils import log_error, set_log_file
from .models import AnalysisReport
from .reporting import build_markdown_report, export_sanitized_eml, report_to_json

DEFAULT_INCLUDE = "*.eml"
OUTPUT_SUBDIR = "output"
LOG_COMPONENT = "cli"

# Output flag -> filename suffix used when no explicit path is given.
OUTPUT_SUFFIXES = {
    "json": "-report.json",
    "markdown": "-report.md",
    "sanitized": "-sanitized.eml",
}

REDACTION_FLAGS = ("emails", "phones", "credit-cards", "ssn", "names")


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eml-triage",
        description="Redact, extract indicators from and score suspicious EML messages.",
    )
    source = parser.add_argument_group("input")
    source.add_argument("-f", "--file", dest="eml", help="Single EML message to triage.")
    source.add_argument("-d", "--dir", help="Directory of EML messages to triage.")
    source.add_argument(
        "--recursive",
        action="store_true",
        help="Descend into subdirectories of --dir.",
    )
    source.add_argument(
        "--include",
        action="append",
        default=[],
        help=f"Filename glob to pick up from --dir (repeatable, default {DEFAULT_INCLUDE}).",
    )
    source.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Filename glob to skip in --dir (repeatable).",
    )

    output = parser.add_argument_group("output")
    output.add_argument(
        "--json",
        nargs="?",
        const=True,
        help="Save the full report as JSON (optional path, default <eml>-report.json).",
    )
    output.add_argument(
        "--markdown",
        nargs="?",
        const=True,
        help="Save an analyst report as Markdown (optional path, default <eml>-report.md).",
    )
    output.add_argument(
        "--sanitized",
        nargs="?",
        const=True,
        help="Save the message with PII replaced (optional path, default <eml>-sanitized.eml).",
    )
    output.add_argument(
        "--iocs",
        action="store_true",
        help="Print defanged indicators ready to paste into a ticket.",
    )
    output.add_argument(
        "--no-defang",
        action="store_true",
        help="Keep indicators clickable in the Markdown report.",
    )

    redaction = parser.add_argument_group("redaction")
    for category in REDACTION_FLAGS:
        redaction.add_argument(
            f"--no-redact-{category}",
            action="store_true",
            help=f"Leave {category.replace('-', ' ')} in the body untouched.",
        )
    redaction.add_argument(
        "--custom-pattern",
        action="append",
        default=[],
        help="Extra regular expression to redact (repeatable, invalid ones are ignored).",
    )

    logging_group = parser.add_argument_group("logging")
    logging_group.add_argument("-v", "--verbose", action="store_true", help="Log progress.")
    logging_group.add_argument("--debug", action="store_true", help="Log parser and redaction detail.")
    logging_group.add_argument("--log-file", help="Append log lines to this file instead of stderr.")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if not (args.eml or args.dir):
        parser.error("one of -f/--file or -d/--dir is required")

    config = _apply_overrides(TriageConfig.from_env(), args)
    set_log_file(args.log_file or config.log_file)
    analyzer = TriageAnalyzer(config, verbose=args.verbose or args.debug, debug=args.debug)

    if args.eml:
        eml_paths = [args.eml]
    else:
        eml_paths = _collect_eml_paths(args.dir, args.recursive, args.include, args.exclude)
    if not eml_paths:
        return 0

    output_dir = None
    if args.dir:
        output_dir = _batch_output_dir(args.dir, args.json, args.markdown)
        os.makedirs(output_dir, exist_ok=True)

    batch = bool(args.dir) or len(eml_paths) > 1
    failed = 0
    started = time.monotonic()
    for done, eml_path in enumerate(eml_paths):
        if batch:
            eta = _eta(started, done, len(eml_paths))
            suffix = f", eta {eta}" if eta else ""
            sys.stderr.write(f"[{done + 1}/{len(eml_paths)}] Analyzing {eml_path}{suffix}\n")
        try:
            report = analyzer.analyze_path(eml_path)
        except (ParseError, OSError) as exc:
            log_error(f"Failed to analyze {eml_path}: {exc}", component=LOG_COMPONENT)
            failed += 1
            continue
        _emit_outputs(report, eml_path, args, output_dir, config.report_defang and not args.no_defang)

    return 1 if failed else 0


def _emit_outputs(
    report: AnalysisReport,
    eml_path: str,
    args: argparse.Namespace,
    output_dir: str | None,
    defang: bool,
) -> None:
    renderers = {
        "json": lambda: report_to_json(report),
        "markdown": lambda: build_markdown_report(report, defang=defang),
        "sanitized": lambda: export_sanitized_eml(report),
    }
    wrote_any = False
    for flag, render in renderers.items():
        value = getattr(args, flag)
        if not value:
            continue
        target = _resolve_output_path(eml_path, value, OUTPUT_SUFFIXES[flag], output_dir)
        with open(target, "w", encoding="utf-8") as handle:
            handle.write(render())
        wrote_any = True

    if args.iocs:
        sys.stdout.write(format_iocs_for_copy(report.iocs))
    elif not wrote_any and not args.dir:
        sys.stdout.write(report_to_json(report) + "\n")


def _apply_overrides(config: TriageConfig, args: argparse.Namespace) -> TriageConfig:
    return dataclasses.replace(
        config,
        redact_emails=config.redact_emails and not args.no_redact_emails,
        redact_phones=config.redact_phones and not args.no_redact_phones,
        redact_credit_cards=config.redact_credit_cards and not args.no_redact_credit_cards,
        redact_ssn=config.redact_ssn and not args.no_redact_ssn,
        redact_names=config.redact_names and not args.no_redact_names,
        custom_patterns=config.custom_patterns + tuple(args.custom_pattern),
    )


def _resolve_output_path(
    eml_path: str, value: object, suffix: str, output_dir: str | None = None
) -> str:
    """Explicit paths win for single files; batches always derive a name."""
    if isinstance(value, str) and output_dir is None:
        return value
    stem = os.path.splitext(os.path.basename(eml_path))[0] + suffix
    return os.path.join(output_dir or os.path.dirname(eml_path) or ".", stem)


def _collect_eml_paths(
    directory: str,
    recursive: bool = False,
    includes: list[str] | None = None,
    excludes: list[str] | None = None,
) -> list[str]:
    if not os.path.isdir(directory):
        return []
    wanted = includes or [DEFAULT_INCLUDE]
    skipped = excludes or []

    if recursive:
        candidates = [
            os.path.join(root, name) for root, _, names in os.walk(directory) for name in names
        ]
    else:
        candidates = [os.path.join(directory, name) for name in os.listdir(directory)]

    return sorted(
        path
        for path in candidates
        if os.path.isfile(path) and _selected(os.path.basename(path), wanted, skipped)
    )


def _selected(name: str, includes: list[str], excludes: list[str]) -> bool:
    return any(fnmatch.fnmatch(name, pattern) for pattern in includes) and not any(
        fnmatch.fnmatch(name, pattern) for pattern in excludes
    )


def _batch_output_dir(directory: str, json_value: object, md_value: object) -> str:
    for value in (json_value, md_value):
        if isinstance(value, str):
            return value
    return os.path.join(directory, OUTPUT_SUBDIR)


def _eta(started: float, done: int, total: int) -> str:
    if done <= 0:
        return ""
    remaining = int((time.monotonic() - started) / done * (total - done))
    minutes, seconds = divmod(max(remaining, 0), 60)
    return f"{minutes}m {seconds}s" if minutes else f"{seconds}s"


if __name__ == "__main__":
    raise SystemExit(main())
