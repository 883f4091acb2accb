from collections.abc import Sequence

from astgen.models import NodeRecord, SyntaxNode


def flatten(tree: SyntaxNode) -> list[NodeRecord]:
    """Flatten ``tree`` into node records in pre-order.

    The root gets id 0 and ids follow visit order, so every child id is
    greater than its parent's. Uses an explicit stack; depth is unbounded.
    """
    records: list[NodeRecord] = []
    stack: list[tuple[SyntaxNode, NodeRecord | None]] = [(tree, None)]
    while stack:
        node, parent = stack.pop()
        record = NodeRecord(id=len(records), type=node.type, value=node.value)
        records.append(record)
        if parent is not None:
            parent.children.append(record.id)
        # reversed so siblings are popped (and numbered) left to right
        stack.extend((child, record) for child in reversed(node.children))
    return records


def rebuild(records: Sequence[NodeRecord]) -> SyntaxNode:
    """Rebuild the tree described by ``records``, the inverse of ``flatten``."""
    if not records:
        raise ValueError("cannot rebuild a tree from zero records")

    nodes: list[SyntaxNode] = []
    for position, record in enumerate(records):
        if record.id != position:
            raise ValueError(f"record at position {position} has id {record.id}")
        value = None if record.value is None else str(record.value)
        nodes.append(SyntaxNode(type=record.type, value=value))

    referenced = [False] * len(records)
    for record in records:
        for child_id in record.children:
            if child_id <= record.id or child_id >= len(records):
                raise ValueError(f"node {record.id} has invalid child id {child_id}")
            if referenced[child_id]:
                raise ValueError(f"node {child_id} has more than one parent")
            referenced[child_id] = True
            nodes[record.id].children.append(nodes[child_id])

    orphans = [i for i, seen in enumerate(referenced[1:], start=1) if not seen]
    if orphans:
        raise ValueError(f"nodes without a parent: {orphans[:10]}")
    return nodes[0]
