from collections.abc import Sized
from enum import Enum


class Admission(Enum):
    """Outcome of the node-count check; rejections carry their log reason."""

    ACCEPT = "accepted"
    TOO_FEW = "too few nodes"
    TOO_MANY = "too many nodes"

    @property
    def accepted(self) -> bool:
        return self is Admission.ACCEPT

    @property
    def reason(self) -> str:
        return self.value


def admit(records: Sized, min_nodes: int, max_nodes: int) -> Admission:
    count = len(records)
    if count < min_nodes:
        return Admission.TOO_FEW
    if count > max_nodes:
        return Admission.TOO_MANY
    return Admission.ACCEPT
