"""Exceptions raised by the triage pipeline."""


class ParseError(ValueError):
    """The input could not be parsed as a MIME message at all."""
