"""
Tree output: console listing and JSON file.

Console format (one line per node, pre-order, 3 spaces per level):

    Timetable (r)
       CourseOne (c)
          PartA (p)

JSON format:
- internal nodes: {"id", "name", "type", "nodes": {<id>: {...}}}
- events:         {"id", "name", "type", "event-type", "start", "end"}
- the root has no "id"
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from rich.console import Console

from orgtree.model import Event, Node, Root

logger = logging.getLogger(__name__)

INDENT = "   "


def format_tree(root: Node) -> list[str]:
    """
    Return the console lines for root and all its descendants.
    """
    lines: list[str] = []

    def visit(node: Node, level: int) -> None:
        lines.append(f"{INDENT * level}{node.name} ({node.type[:1]})")
        if isinstance(node, Event):
            return
        for child in node.nodes.values():
            visit(child, level + 1)

    visit(root, 0)
    return lines


def print_tree(root: Node, console: Optional[Console] = None) -> None:
    """
    Print the tree to stdout.
    """
    out = console if console is not None else Console()
    for line in format_tree(root):
        # Names come straight from the export: written as-is (no markup, tabs or wrapping)
        out.file.write(f"{line}\n")
    out.file.flush()


def tree_to_dict(node: Node) -> dict[str, Any]:
    """
    Convert a node (and its children) into JSON-ready dicts.
    """
    if isinstance(node, Event):
        return {
            "id": node.id,
            "name": node.name,
            "type": node.type,
            "event-type": node.event_type,
            "start": node.start,
            "end": node.end,
        }

    data: dict[str, Any] = {}
    if not isinstance(node, Root):
        data["id"] = node.id
    data["name"] = node.name
    data["type"] = node.type
    data["nodes"] = {child_id: tree_to_dict(child) for child_id, child in node.nodes.items()}
    return data


def write_tree(root: Root, out_path: str | Path) -> bool:
    """
    Write the tree as JSON (4-space indent). Returns False if the file
    could not be written; the error is logged, not raised.
    """
    out = Path(out_path)
    try:
        out.write_text(json.dumps(tree_to_dict(root), indent=4, ensure_ascii=False), encoding="utf-8")
    except OSError as exc:
        logger.error("Could not save tree to %s: %s", out, exc)
        return False

    logger.info("Tree written to %s", out)
    return True
