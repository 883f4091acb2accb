"""Shared fixtures and helpers for tests."""

import threading
from pathlib import Path

import pytest

from astgen.exceptions import ParseFailure
from astgen.models import SyntaxNode

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# FakeParser — a SourceParser driven by one-line directives
# ---------------------------------------------------------------------------


class FakeParser:
    """Parser stand-in whose output is dictated by the source text.

    - ``nodes N``: a root with N - 1 leaf children (N nodes in total)
    - ``crash MESSAGE``: raises RuntimeError(MESSAGE)
    - anything else: raises ParseFailure
    """

    def __init__(self) -> None:
        self.calls: list[bytes] = []
        self._lock = threading.Lock()

    def parse(self, source: bytes, language: str, method_only: bool = False) -> SyntaxNode:
        with self._lock:
            self.calls.append(source)
        keyword, _, arg = source.decode("utf-8").strip().partition(" ")
        if keyword == "nodes":
            count = int(arg)
            leaves = [SyntaxNode(type="leaf", value=str(i)) for i in range(count - 1)]
            return SyntaxNode(type="root", children=leaves)
        if keyword == "crash":
            raise RuntimeError(arg)
        raise ParseFailure(f"unexpected token '{keyword}' at line 1, column 1")


def write_source(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_parser() -> FakeParser:
    return FakeParser()


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from ``tmp_path`` so relative output paths are stable."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "ASTGEN_MIN_NODES",
        "ASTGEN_MAX_NODES",
        "ASTGEN_WORKERS",
        "ASTGEN_PROGRESS_INTERVAL",
        "ASTGEN_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
