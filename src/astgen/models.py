from dataclasses import dataclass, field
from enum import Enum

from pydantic import BaseModel, Field


@dataclass
class SyntaxNode:
    """Normalized parse tree node handed from a parser to the flattener."""

    type: str
    value: str | None = None
    children: list["SyntaxNode"] = field(default_factory=list)


class NodeRecord(BaseModel):
    id: int = Field(ge=0)
    type: str
    value: str | int | float | bool | None = None
    children: list[int] = Field(default_factory=list)


class RejectionKind(str, Enum):
    PARSE_FAILED = "parse_failed"
    TOO_FEW_NODES = "too_few_nodes"
    TOO_MANY_NODES = "too_many_nodes"
    SERIALIZATION_FAILED = "serialization_failed"
    INVALID_PATH = "invalid_path"


@dataclass(frozen=True)
class Accepted:
    path: str
    records: list[NodeRecord]


@dataclass(frozen=True)
class Rejected:
    path: str
    kind: RejectionKind
    reason: str


FileOutcome = Accepted | Rejected


class BatchResult(BaseModel):
    total_files: int = 0
    accepted_count: int = 0
    rejected_count: int = 0
