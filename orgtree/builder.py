"""
Tree construction (flat records -> organisational unit tree).

The export nests levels like this:

    Course
       Part
          Subject (SubPart, optional)
             Module

The tree we build swaps the middle levels:

    Course
       Subject (only when the record has one)
          Part
             Module
                Series
                   Event

Because of the swap, the source PartId cannot be used as-is for part nodes:
the same PartId would then be shared by every subject of a course.
Part nodes get an id of the form "<PartId>-<n>" instead, where n counts the
distinct (anchor, part name) pairs seen during the build.

Important rules:
- existing nodes are never overwritten (first record wins)
- parts are matched by name under their anchor, not by PartId
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Type, TypeVar

from orgtree.model import (
    Course,
    Event,
    InternalNode,
    Module,
    Node,
    Part,
    Record,
    Root,
    Series,
    Subject,
)

logger = logging.getLogger(__name__)

N = TypeVar("N", bound=InternalNode)

_REQUIRED_IDS = ("course_id", "part_id", "module_id", "series_id", "event_id")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_or_create(parent: InternalNode, node_cls: Type[N], node_id: str, name: str) -> N:
    """
    Return the child of parent with node_id, creating it if needed.
    """
    node = parent.nodes.get(node_id)
    if node is None:
        node = node_cls(id=node_id, name=name)
        parent.nodes[node_id] = node
    elif not isinstance(node, node_cls):
        # Sibling ids are unique: the existing node is kept and reused
        logger.warning(
            "Id %r under %s %r is a %s, expected a %s; reusing it",
            node_id,
            parent.type,
            parent.id,
            node.type,
            node_cls.TYPE,
        )
    return node  # type: ignore[return-value]


def _find_part(anchor: InternalNode, part_name: str) -> Optional[Part]:
    """
    Linear scan of the anchor's children for a part with this name.
    First match wins.
    """
    for child in anchor.nodes.values():
        if isinstance(child, Part) and child.name == part_name:
            return child
    return None


def _missing_ids(record: Record) -> list[str]:
    return [name for name in _REQUIRED_IDS if not getattr(record, name)]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class TreeBuilder:
    """
    Builds one tree. The part counter lives on the instance, so each
    builder (and each build_tree() call) starts counting at 0.
    """

    def __init__(self) -> None:
        self.root = Root()
        self.part_counter = 0

    def _next_part_id(self, anchor: InternalNode, source_part_id: str) -> str:
        """
        Synthesize "<PartId>-<n>". An id already taken by a sibling is
        skipped, so no existing node is replaced.
        """
        self.part_counter += 1
        part_id = f"{source_part_id}-{self.part_counter}"
        while part_id in anchor.nodes:
            logger.warning("Part id %r is already used under %s %r; skipping it", part_id, anchor.type, anchor.id)
            self.part_counter += 1
            part_id = f"{source_part_id}-{self.part_counter}"
        return part_id

    def add(self, record: Record, position: int = 0) -> None:
        missing = _missing_ids(record)
        if missing:
            # Permissive: the record is still absorbed under empty keys
            logger.warning("Record %d has empty identifiers: %s", position, ", ".join(missing))

        course = _get_or_create(self.root, Course, record.course_id, record.course_name)

        # A subpart maps to a subject, but is not always present
        anchor: InternalNode = course
        if record.has_subject:
            anchor = _get_or_create(course, Subject, record.subject_id, record.subject_name)

        part = _find_part(anchor, record.part_name)
        if part is None:
            part_id = self._next_part_id(anchor, record.part_id)
            part = Part(id=part_id, name=record.part_name)
            anchor.nodes[part_id] = part

        module = _get_or_create(part, Module, record.module_id, record.module_name)
        series = _get_or_create(module, Series, record.series_id, record.series_name)

        if record.event_id not in series.nodes:
            series.nodes[record.event_id] = Event(
                id=record.event_id,
                name=record.event_name,
                event_type=record.event_type,
                start=record.start,
                end=record.end,
            )


def build_tree(records: Iterable[Record]) -> Root:
    """
    Build the organisational unit tree from records, in input order.
    """
    builder = TreeBuilder()
    for position, record in enumerate(records, start=1):
        builder.add(record, position)

    logger.debug("Built tree with %d courses and %d parts", len(builder.root.nodes), builder.part_counter)
    return builder.root


def count_nodes(node: Node) -> int:
    """
    Count node and all its descendants.
    """
    if isinstance(node, Event):
        return 1
    return 1 + sum(count_nodes(child) for child in node.nodes.values())
