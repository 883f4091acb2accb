"""Error types raised by astgen.

Fatal errors (discovery, sink open, configuration) abort a whole run.
``ParseFailure`` is per file: batch mode records it in the failure log,
single-file mode lets it reach the caller.
"""


class AstgenError(Exception):
    """Base class for all astgen errors."""


class ConfigError(AstgenError):
    """Invalid option or environment value."""


class DiscoveryError(AstgenError):
    """The input pattern is invalid or could not be expanded."""


class SinkOpenError(AstgenError):
    """One of the batch output files could not be created."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot open output {path}: {reason}")
        self.path = path
        self.reason = reason


class ParseFailure(AstgenError):
    """A file could not be read or parsed."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SerializationError(AstgenError):
    """A node record sequence could not be rendered as JSON."""
