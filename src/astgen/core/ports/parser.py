from typing import Protocol

from astgen.models import SyntaxNode


class SourceParser(Protocol):
    """Turns source bytes into a normalized syntax tree.

    Implementations raise ``ParseFailure`` when the input is malformed.
    """

    def parse(self, source: bytes, language: str, method_only: bool = False) -> SyntaxNode: ...
