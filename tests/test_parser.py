"""Tests for tasq.tasks.parser: task, goal, notes and context extraction."""

from __future__ import annotations

import pytest

from tasq.tasks.model import Task, TaskStatus
from tasq.tasks.parser import match_checkbox, parse, parse_context

CONTENT = """# My Project
This is a description
Second line

## Context
files: src/foo.ts, src/bar.ts
repos: github.com/foo, github.com/bar

## Goals
- [ ] Goal one
- [x] Goal two completed

## Tasks
Some notes here
- [ ] Pending task
- [~] In-progress task
- [x] Completed task
"""


@pytest.fixture
def parsed():
    return parse(CONTENT)


class TestHeader:
    def test_name_and_description(self, parsed) -> None:
        assert parsed.name == "My Project"
        assert parsed.description == "This is a description\nSecond line"

    def test_first_title_wins(self) -> None:
        doc = parse("# First\n# Second\n- [ ] t")
        assert doc.name == "First"

    def test_missing_title_uses_default_name(self) -> None:
        doc = parse("## Tasks\n- [ ] t", default_name="my-dir")
        assert doc.name == "my-dir"

    def test_lines_are_kept_verbatim(self) -> None:
        text = "# T\r\n  - [ ]  spaced  \n\n"
        doc = parse(text)
        assert doc.lines == ["# T\r", "  - [ ]  spaced  ", "", ""]
        assert doc.text() == text


class TestTasks:
    def test_goals(self, parsed) -> None:
        assert [(g.description, g.status) for g in parsed.goals] == [
            ("Goal one", TaskStatus.PENDING),
            ("Goal two completed", TaskStatus.COMPLETED),
        ]

    def test_every_section_contributes_tasks(self, parsed) -> None:
        assert [t.description for t in parsed.tasks] == [
            "Goal one",
            "Goal two completed",
            "Pending task",
            "In-progress task",
            "Completed task",
        ]
        assert [t.section for t in parsed.tasks] == ["goals", "goals", "tasks", "tasks", "tasks"]

    def test_statuses(self, parsed) -> None:
        assert [t.status for t in parsed.tasks[2:]] == [
            TaskStatus.PENDING,
            TaskStatus.IN_PROGRESS,
            TaskStatus.COMPLETED,
        ]

    def test_line_numbers(self, parsed) -> None:
        assert [t.line for t in parsed.tasks] == [9, 10, 14, 15, 16]

    def test_goals_alias_task_entries(self, parsed) -> None:
        assert parsed.goals[0] is parsed.tasks[0]
        assert parsed.goals[1] is parsed.tasks[1]

    def test_section_tagging_example(self) -> None:
        doc = parse("# T\n## Goals\n- [ ] G1\n## Tasks\n- [x] K1")
        assert [(g.description, g.status) for g in doc.goals] == [("G1", TaskStatus.PENDING)]
        assert [(t.description, t.section, t.status) for t in doc.tasks] == [
            ("G1", "goals", TaskStatus.PENDING),
            ("K1", "tasks", TaskStatus.COMPLETED),
        ]

    def test_custom_section_is_case_folded(self) -> None:
        doc = parse("# T\n## Backlog Items\n- [ ] later")
        assert doc.tasks[0].section == "backlog items"
        assert doc.goals == []

    def test_tasks_under_header_have_no_section(self) -> None:
        doc = parse("# T\n- [ ] top level\n")
        assert doc.tasks == [Task(line=1, status=TaskStatus.PENDING, description="top level")]

    def test_tasks_before_any_heading_have_no_section(self) -> None:
        doc = parse("- [x] orphan")
        assert doc.tasks[0].section is None
        assert doc.tasks[0].status is TaskStatus.COMPLETED

    def test_capital_x_is_completed(self) -> None:
        doc = parse("## Tasks\n- [X] shouted")
        assert doc.tasks[0].status is TaskStatus.COMPLETED

    def test_empty_brackets_are_pending(self) -> None:
        doc = parse("## Tasks\n- [] bare")
        assert doc.tasks[0].status is TaskStatus.PENDING
        assert doc.tasks[0].description == "bare"

    def test_indented_checkbox(self) -> None:
        doc = parse("## Tasks\n    - [~]   nested  ")
        assert doc.tasks[0].description == "nested"
        assert doc.tasks[0].status is TaskStatus.IN_PROGRESS

    def test_no_ids_assigned_when_parsing(self, parsed) -> None:
        assert all(t.id is None for t in parsed.tasks)


class TestNotes:
    def test_notes_before_first_checkbox(self, parsed) -> None:
        assert parsed.notes == "Some notes here"

    def test_notes_are_not_task_descriptions(self) -> None:
        doc = parse("# T\n## Tasks\nline one\nline two\n- [ ] real task\ntrailing text")
        assert doc.notes == "line one\nline two"
        assert [t.description for t in doc.tasks] == ["real task"]

    def test_notes_only_from_tasks_section(self) -> None:
        doc = parse("# T\n## Ideas\nnot notes\n- [ ] idea")
        assert doc.notes == ""

    def test_notes_captured_per_section_entry(self) -> None:
        doc = parse("# T\n## Tasks\n- [ ] a\n## Other\n- [ ] b\n## Tasks\nsecond notes\n- [ ] c")
        assert doc.notes == "second notes"

    def test_notes_after_goals_checkboxes(self) -> None:
        doc = parse("# T\n## Goals\n- [ ] g\n## Tasks\nnotes here\n- [ ] t")
        assert doc.notes == "notes here"


class TestMalformedInput:
    def test_non_checkbox_bullets_are_text(self) -> None:
        doc = parse("# T\n- a plain bullet\n## Tasks\n- [link](http://x)\n- [ ] real")
        assert doc.description == "- a plain bullet"
        assert doc.notes == "- [link](http://x)"
        assert [t.description for t in doc.tasks] == ["real"]

    def test_empty_input(self) -> None:
        doc = parse("")
        assert doc.tasks == []
        assert doc.lines == [""]

    def test_deeper_headings_are_not_text(self) -> None:
        doc = parse("# T\n### Sub\ntext")
        assert doc.description == "text"


class TestCodeFences:
    def test_fenced_checkboxes_and_headings_ignored(self) -> None:
        doc = parse("# T\n## Tasks\n```markdown\n## Not a section\n- [ ] not a task\n```\n- [ ] real")
        assert [t.description for t in doc.tasks] == ["real"]
        assert doc.tasks[0].section == "tasks"
        assert doc.tasks[0].line == 6

    def test_fenced_lines_are_text(self) -> None:
        doc = parse("# T\n```\n# not a title\n```")
        assert doc.name == "T"
        assert doc.description == "```\n# not a title\n```"


class TestReparse:
    def test_reparse_is_identical(self, parsed) -> None:
        again = parse(parsed.text())
        assert again.tasks == parsed.tasks
        assert again.goals == parsed.goals
        assert again.lines == parsed.lines


class TestMatchCheckbox:
    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("- [ ] a", (TaskStatus.PENDING, "a")),
            ("-[x] b", (TaskStatus.COMPLETED, "b")),
            ("[~] c", (TaskStatus.IN_PROGRESS, "c")),
            ("  - [X]  d  ", (TaskStatus.COMPLETED, "d")),
        ],
    )
    def test_matches(self, line: str, expected: tuple[TaskStatus, str]) -> None:
        assert match_checkbox(line) == expected

    @pytest.mark.parametrize("line", ["- [?] q", "- item", "text [ ] later", "* [ ] star"])
    def test_non_matches(self, line: str) -> None:
        assert match_checkbox(line) is None


class TestParseContext:
    def test_files_and_repos(self) -> None:
        directive = parse_context(CONTENT)
        assert directive.files == ["src/foo.ts", "src/bar.ts"]
        assert directive.repos == ["github.com/foo", "github.com/bar"]

    def test_lines_accumulate(self) -> None:
        directive = parse_context("## Context\nfiles: a.py\nFILES: b.py, , c.py\nrepos: ../x\n")
        assert directive.files == ["a.py", "b.py", "c.py"]
        assert directive.repos == ["../x"]

    def test_only_inside_context_section(self) -> None:
        directive = parse_context("files: outside.py\n## context\nfiles: in.py\n## Tasks\nfiles: after.py")
        assert directive.files == ["in.py"]

    def test_no_context_section(self) -> None:
        directive = parse_context("# T\n## Tasks\n- [ ] a")
        assert directive.is_empty()


class TestLineEndings:
    def test_crlf_description_and_notes(self) -> None:
        doc = parse("# T\r\nfirst line\r\nsecond line\r\n## Tasks\r\na note\r\n- [ ] task\r\n")
        assert doc.name == "T"
        assert doc.description == "first line\nsecond line"
        assert doc.notes == "a note"
        assert doc.tasks[0].description == "task"
        assert doc.lines[1] == "first line\r"
