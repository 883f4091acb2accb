"""Unit tests for the data models."""

import pytest
from pydantic import ValidationError

from astgen.models import Accepted, BatchResult, NodeRecord, Rejected, RejectionKind, SyntaxNode


class TestNodeRecord:
    def test_defaults(self) -> None:
        record = NodeRecord(id=0, type="module")
        assert record.value is None
        assert record.children == []

    def test_children_lists_are_not_shared(self) -> None:
        first = NodeRecord(id=0, type="a")
        second = NodeRecord(id=1, type="b")
        first.children.append(1)
        assert second.children == []

    def test_rejects_negative_id(self) -> None:
        with pytest.raises(ValidationError):
            NodeRecord(id=-1, type="module")

    def test_requires_type(self) -> None:
        with pytest.raises(ValidationError):
            NodeRecord(id=0)  # type: ignore[call-arg]

    def test_serializes_without_none(self) -> None:
        record = NodeRecord(id=2, type="identifier", value="x", children=[])
        assert record.model_dump(exclude_none=True) == {"id": 2, "type": "identifier", "value": "x", "children": []}


class TestSyntaxNode:
    def test_structural_equality(self) -> None:
        a = SyntaxNode(type="call", children=[SyntaxNode(type="name", value="f")])
        b = SyntaxNode(type="call", children=[SyntaxNode(type="name", value="f")])
        assert a == b
        b.children[0].value = "g"
        assert a != b


class TestOutcomes:
    def test_accepted_and_rejected_are_distinct(self) -> None:
        accepted = Accepted("a.py", [NodeRecord(id=0, type="module")])
        rejected = Rejected("b.py", RejectionKind.TOO_FEW_NODES, "too few nodes")
        assert accepted.path == "a.py"
        assert rejected.kind.value == "too_few_nodes"

    def test_batch_result_defaults(self) -> None:
        assert BatchResult().model_dump() == {"total_files": 0, "accepted_count": 0, "rejected_count": 0}
