"""
Central data model definitions used across the project.

This module defines the flat Record read from the CSV export and the
node types the tree is built from, so that:
- the source, builder and sink modules share the same field names
- every node type is an explicit class instead of a loose dict
- event leaves can never grow children
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Dict, Union


# Column order of the CSV export (no header row in the file)
CSV_COLUMNS = (
    "TriposId",
    "TriposName",
    "PartId",
    "PartName",
    "SubPartId",
    "SubPartName",
    "ModuleId",
    "ModuleName",
    "SerieId",
    "SerieName",
    "EventId",
    "EventTitle",
    "EventType",
    "EventStartDateTime",
    "EventEndDateTime",
)


@dataclass(frozen=True)
class Record:
    """
    Represents one row of the timetable export.

    Field order matches CSV_COLUMNS. The subject fields may be empty.
    """

    course_id: str
    course_name: str
    part_id: str
    part_name: str
    subject_id: str
    subject_name: str
    module_id: str
    module_name: str
    series_id: str
    series_name: str
    event_id: str
    event_name: str
    event_type: str
    start: str
    end: str

    @property
    def has_subject(self) -> bool:
        return bool(self.subject_id and self.subject_name)


@dataclass
class InternalNode:
    """
    A node that owns children, keyed by child id.
    """

    TYPE: ClassVar[str] = ""

    id: str
    name: str
    nodes: Dict[str, "Node"] = field(default_factory=dict)

    @property
    def type(self) -> str:
        return self.TYPE


@dataclass
class Root(InternalNode):
    TYPE: ClassVar[str] = "root"

    id: str = ""
    name: str = "Timetable"


@dataclass
class Course(InternalNode):
    TYPE: ClassVar[str] = "course"


@dataclass
class Subject(InternalNode):
    TYPE: ClassVar[str] = "subject"


@dataclass
class Part(InternalNode):
    TYPE: ClassVar[str] = "part"


@dataclass
class Module(InternalNode):
    TYPE: ClassVar[str] = "module"


@dataclass
class Series(InternalNode):
    TYPE: ClassVar[str] = "series"


@dataclass
class Event:
    """
    Represents one concrete timetable event (leaf node).

    start/end are kept exactly as exported (no date parsing).
    """

    TYPE: ClassVar[str] = "event"

    id: str
    name: str
    event_type: str
    start: str
    end: str

    @property
    def type(self) -> str:
        return self.TYPE


Node = Union[InternalNode, Event]
