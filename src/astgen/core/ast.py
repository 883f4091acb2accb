import logging
from pathlib import Path

from astgen.core.languages import resolve_language
from astgen.core.ports.parser import SourceParser
from astgen.exceptions import ParseFailure
from astgen.models import SyntaxNode

logger = logging.getLogger(__name__)


def default_parser() -> SourceParser:
    from astgen.parsers.tree_sitter_adapter import TreeSitterParser

    return TreeSitterParser()


def parse_source(
    source_bytes: bytes,
    language: str,
    parser: SourceParser,
    method_only: bool = False,
) -> SyntaxNode:
    try:
        return parser.parse(source_bytes, language, method_only)
    except ParseFailure:
        raise
    except Exception as e:
        logger.debug("parser raised %s for %s input", type(e).__name__, language, exc_info=True)
        raise ParseFailure(f"{type(e).__name__}: {e}") from e


def parse_file(
    path: str | Path,
    parser: SourceParser,
    method_only: bool = False,
    language: str | None = None,
) -> SyntaxNode:
    """Parse one file into a normalized tree.

    Every failure (unreadable file, unknown language, syntax error, parser
    crash) surfaces as ``ParseFailure`` carrying the underlying message.
    """
    file_path = Path(path)
    try:
        resolved_language = resolve_language(language, file_path)
    except ValueError as e:
        raise ParseFailure(str(e)) from None

    try:
        source_bytes = file_path.read_bytes()
    except FileNotFoundError:
        raise ParseFailure(f"File not found: {path}") from None
    except OSError as e:
        raise ParseFailure(f"Cannot read {path}: {e.strerror or e}") from None

    return parse_source(source_bytes, resolved_language, parser, method_only)
