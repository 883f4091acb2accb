import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import TypeAdapter
from pydantic_core import PydanticSerializationError

from astgen.core.ast import default_parser, parse_file
from astgen.core.flatten import flatten
from astgen.core.ports.parser import SourceParser
from astgen.exceptions import SerializationError
from astgen.models import NodeRecord

_RECORDS = TypeAdapter(list[NodeRecord])


def dump_records(records: Sequence[NodeRecord]) -> str:
    """Render records as a single-line JSON array, omitting absent values."""
    try:
        return _RECORDS.dump_json(list(records), exclude_none=True).decode("utf-8")
    except (PydanticSerializationError, UnicodeDecodeError) as e:
        raise SerializationError(f"cannot serialize AST: {e}") from e


def load_records(text: str | bytes) -> list[NodeRecord]:
    return _RECORDS.validate_json(text)


def export_file(
    path: str | Path,
    output: str | Path | None = None,
    method_only: bool = False,
    language: str | None = None,
    parser: SourceParser | None = None,
) -> list[NodeRecord]:
    """Parse one file and write its flattened AST as a JSON document.

    Writes to ``output`` (created or overwritten) or, when omitted, to
    stdout. No node-count bounds apply. Errors propagate to the caller.
    """
    records = flatten(parse_file(path, parser or default_parser(), method_only, language))
    document = dump_records(records)
    if output is None:
        sys.stdout.write(document + "\n")
        sys.stdout.flush()
    else:
        Path(output).write_text(document + "\n", encoding="utf-8")
    return records
