"""
Unit tests for tree construction.

Rules covered here:
- parts are matched by name under their anchor (subject or course)
- new parts get the id "<PartId>-<n>"
- first record wins, duplicates change nothing
- records without a subject attach their part to the course
"""

import unittest

from orgtree.builder import TreeBuilder, build_tree, count_nodes
from orgtree.model import Course, Event, Module, Part, Record, Root, Series, Subject


def rec(
    course="C1",
    part="P1",
    part_name="PartA",
    subject="",
    subject_name="",
    module="M1",
    series="S1",
    event="E1",
    event_name="EventA",
    start="2024-01-01T09:00",
    end="2024-01-01T10:00",
) -> Record:
    return Record(
        course,
        "CourseOne",
        part,
        part_name,
        subject,
        subject_name,
        module,
        "Mod1",
        series,
        "Ser1",
        event,
        event_name,
        "Lecture",
        start,
        end,
    )


class TestBuildTree(unittest.TestCase):
    def test_end_to_end_example(self) -> None:
        records = [
            rec(),
            rec(event="E2", event_name="EventB", start="2024-01-01T10:00", end="2024-01-01T11:00"),
        ]
        root = build_tree(records)

        self.assertIsInstance(root, Root)
        self.assertEqual(root.name, "Timetable")
        self.assertEqual(list(root.nodes), ["C1"])

        course = root.nodes["C1"]
        self.assertIsInstance(course, Course)
        self.assertEqual(list(course.nodes), ["P1-1"])

        part = course.nodes["P1-1"]
        self.assertIsInstance(part, Part)
        self.assertEqual(part.name, "PartA")

        module = part.nodes["M1"]
        self.assertIsInstance(module, Module)
        series = module.nodes["S1"]
        self.assertIsInstance(series, Series)
        self.assertEqual(list(series.nodes), ["E1", "E2"])

        e2 = series.nodes["E2"]
        self.assertIsInstance(e2, Event)
        self.assertEqual(e2.name, "EventB")
        self.assertEqual(e2.event_type, "Lecture")
        self.assertEqual(e2.start, "2024-01-01T10:00")
        self.assertEqual(e2.end, "2024-01-01T11:00")

    def test_empty_input_gives_empty_root(self) -> None:
        root = build_tree([])
        self.assertEqual(root.nodes, {})
        self.assertEqual(count_nodes(root), 1)

    def test_same_part_name_different_subjects(self) -> None:
        records = [
            rec(subject="SUB1", subject_name="Physics"),
            rec(subject="SUB2", subject_name="Chemistry", event="E2"),
        ]
        course = build_tree(records).nodes["C1"]

        self.assertEqual(list(course.nodes), ["SUB1", "SUB2"])
        self.assertIsInstance(course.nodes["SUB1"], Subject)
        self.assertEqual(list(course.nodes["SUB1"].nodes), ["P1-1"])
        self.assertEqual(list(course.nodes["SUB2"].nodes), ["P1-2"])

    def test_same_part_name_no_subject_merges(self) -> None:
        # differing source PartId does not matter, the name does
        records = [
            rec(part="P1"),
            rec(part="P9", module="M2", series="S2", event="E2"),
        ]
        course = build_tree(records).nodes["C1"]

        self.assertEqual(list(course.nodes), ["P1-1"])
        part = course.nodes["P1-1"]
        self.assertEqual(list(part.nodes), ["M1", "M2"])
        self.assertEqual(list(part.nodes["M2"].nodes["S2"].nodes), ["E2"])

    def test_different_part_names_same_anchor(self) -> None:
        records = [rec(part_name="PartA"), rec(part_name="PartB")]
        course = build_tree(records).nodes["C1"]
        self.assertEqual(list(course.nodes), ["P1-1", "P1-2"])

    def test_missing_subject_attaches_part_to_course(self) -> None:
        records = [
            rec(subject="SUB1", subject_name="Physics"),
            rec(subject="SUB1", subject_name="", event="E2"),
        ]
        course = build_tree(records).nodes["C1"]

        self.assertIn("SUB1", course.nodes)
        parts = [n for n in course.nodes.values() if isinstance(n, Part)]
        self.assertEqual(len(parts), 1)
        self.assertEqual(parts[0].id, "P1-2")
        self.assertEqual(list(parts[0].nodes["M1"].nodes["S1"].nodes), ["E2"])

    def test_subject_name_without_id_attaches_part_to_course(self) -> None:
        root = build_tree([rec(subject="", subject_name="Physics")])
        course = root.nodes["C1"]

        self.assertEqual(list(course.nodes), ["P1-1"])
        self.assertIsInstance(course.nodes["P1-1"], Part)
        self.assertFalse(any(isinstance(n, Subject) for n in course.nodes.values()))

    def test_part_id_taken_by_subject_is_skipped(self) -> None:
        records = [
            rec(subject="P1-2", subject_name="Physics"),
            rec(event="E2"),
        ]
        with self.assertLogs("orgtree.builder", level="WARNING") as logs:
            course = build_tree(records).nodes["C1"]

        self.assertIn("'P1-2'", logs.output[0])
        self.assertIsInstance(course.nodes["P1-2"], Subject)
        self.assertEqual(list(course.nodes["P1-2"].nodes), ["P1-1"])
        self.assertIsInstance(course.nodes["P1-3"], Part)
        self.assertIn("E2", course.nodes["P1-3"].nodes["M1"].nodes["S1"].nodes)

    def test_subject_id_of_existing_part_is_logged(self) -> None:
        records = [
            rec(),
            rec(subject="P1-1", subject_name="Physics", event="E2"),
        ]
        with self.assertLogs("orgtree.builder", level="WARNING") as logs:
            course = build_tree(records).nodes["C1"]

        self.assertIn("expected a subject", logs.output[0])
        # the existing part is kept, nothing is replaced
        self.assertEqual(list(course.nodes), ["P1-1"])
        self.assertIsInstance(course.nodes["P1-1"], Part)

    def test_duplicate_record_is_idempotent(self) -> None:
        once = build_tree([rec()])
        twice = build_tree([rec(), rec()])
        self.assertEqual(once, twice)

    def test_first_record_wins(self) -> None:
        records = [
            rec(event_name="First", start="09:00"),
            rec(event_name="Second", start="11:00"),
        ]
        event = build_tree(records).nodes["C1"].nodes["P1-1"].nodes["M1"].nodes["S1"].nodes["E1"]
        self.assertEqual(event.name, "First")
        self.assertEqual(event.start, "09:00")

    def test_build_is_deterministic(self) -> None:
        records = [
            rec(subject="SUB1", subject_name="Physics"),
            rec(part_name="PartB", event="E2"),
            rec(course="C2", event="E3"),
        ]
        self.assertEqual(build_tree(records), build_tree(records))

    def test_counter_restarts_per_build(self) -> None:
        build_tree([rec(part_name="X"), rec(part_name="Y")])
        root = build_tree([rec()])
        self.assertEqual(list(root.nodes["C1"].nodes), ["P1-1"])

    def test_counter_is_global_across_courses(self) -> None:
        root = build_tree([rec(course="C1"), rec(course="C2")])
        self.assertEqual(list(root.nodes["C1"].nodes), ["P1-1"])
        self.assertEqual(list(root.nodes["C2"].nodes), ["P1-2"])

    def test_empty_ids_are_absorbed_with_warning(self) -> None:
        builder = TreeBuilder()
        with self.assertLogs("orgtree.builder", level="WARNING") as logs:
            builder.add(rec(event=""), position=3)

        self.assertIn("Record 3", logs.output[0])
        self.assertIn("event_id", logs.output[0])
        series = builder.root.nodes["C1"].nodes["P1-1"].nodes["M1"].nodes["S1"]
        self.assertIn("", series.nodes)

    def test_count_nodes(self) -> None:
        root = build_tree([rec(), rec(event="E2")])
        # root, course, part, module, series, 2 events
        self.assertEqual(count_nodes(root), 7)


if __name__ == "__main__":
    unittest.main()
