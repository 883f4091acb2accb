import glob
import logging
from pathlib import Path

from astgen.exceptions import DiscoveryError

logger = logging.getLogger(__name__)

_WILDCARDS = frozenset("*?[")


def has_wildcard(pattern: str) -> bool:
    return any(ch in _WILDCARDS for ch in pattern)


def find_files(pattern: str, require_match: bool = False) -> set[Path]:
    """Expand ``pattern`` into the set of regular files it names.

    A pattern without wildcards is taken as a literal path. ``**`` matches
    any number of directories and an unclosed ``[`` matches itself, as in
    :mod:`fnmatch`. Directories are skipped and paths that resolve to the same
    file are reported once.
    """
    if not pattern or not pattern.strip():
        raise DiscoveryError("empty input pattern")

    if has_wildcard(pattern):
        try:
            candidates = [Path(p) for p in glob.glob(pattern, recursive=True, include_hidden=True)]
        except OSError as e:
            raise DiscoveryError(f"cannot expand {pattern!r}: {e}") from e
    else:
        candidates = [Path(pattern)]

    files: set[Path] = set()
    seen: set[Path] = set()
    for candidate in candidates:
        try:
            if not candidate.is_file():
                continue
            resolved = candidate.resolve()
        except OSError as e:
            raise DiscoveryError(f"cannot access {candidate}: {e}") from e
        if resolved in seen:
            continue
        seen.add(resolved)
        files.add(candidate)

    logger.debug("pattern %r matched %d file(s)", pattern, len(files))
    if require_match and not files:
        raise DiscoveryError(f"no files match {pattern!r}")
    return files
