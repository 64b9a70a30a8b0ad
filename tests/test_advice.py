"""Tests for AI prompt building and response parsing."""

from datetime import date

import pytest

from taskdeck.core.advice import (
    deadline_prompt,
    parse_deadline,
    parse_priority,
    parse_subtasks,
    priority_prompt,
    summary_prompt,
)
from taskdeck.core.models import Priority


class TestParsePriority:
    @pytest.mark.parametrize("raw,expected", [("high", Priority.HIGH), (" Low\n", Priority.LOW), ("MEDIUM", Priority.MEDIUM)])
    def test_exact_answers(self, raw, expected):
        assert parse_priority(raw) == expected

    def test_chatty_answer_defaults_to_medium(self):
        assert parse_priority("I think high") == Priority.MEDIUM

    def test_empty_defaults_to_medium(self):
        assert parse_priority("") == Priority.MEDIUM


class TestParseDeadline:
    def test_iso_date(self):
        assert parse_deadline("2025-01-20\n") == date(2025, 1, 20)

    @pytest.mark.parametrize("raw", ["null", "", "next friday", "2025-1-20", "2025-02-30", "Due 2025-01-20"])
    def test_anything_else_is_none(self, raw):
        assert parse_deadline(raw) is None


class TestParseSubtasks:
    def test_json_array(self):
        assert parse_subtasks('["Book flights", "Pack bags"]') == ["Book flights", "Pack bags"]

    def test_strips_code_fences(self):
        raw = '```json\n["One", "Two"]\n```'
        assert parse_subtasks(raw) == ["One", "Two"]

    def test_falls_back_to_lines(self):
        raw = "- Book flights\n* Pack bags\n\n1. Call taxi\n"
        assert parse_subtasks(raw) == ["Book flights", "Pack bags", "Call taxi"]

    def test_non_list_json_is_empty(self):
        assert parse_subtasks('{"steps": ["a"]}') == []

    def test_blank(self):
        assert parse_subtasks("   ") == []

    def test_drops_blank_items(self):
        assert parse_subtasks('["a", "", "  "]') == ["a"]


class TestPrompts:
    def test_priority_prompt_includes_text(self):
        assert "Task: Fix the roof" in priority_prompt("Fix the roof")

    def test_deadline_prompt_includes_reference_date(self):
        prompt = deadline_prompt("Pay rent by Friday", date(2025, 1, 15))
        assert "Current Date: 2025-01-15" in prompt
        assert "Task: Pay rent by Friday" in prompt

    def test_summary_prompt_lists_tasks(self, make_task, today):
        tasks = [
            make_task("1", "Ship release", Priority.HIGH, deadline=today),
            make_task("2", "Water plants", Priority.LOW),
        ]
        prompt = summary_prompt(tasks)
        assert "- Ship release (Priority: high, Due: 2025-01-15)" in prompt
        assert "- Water plants (Priority: low, Due: None)" in prompt

    def test_summary_prompt_tolerates_malformed_deadline(self, make_task):
        prompt = summary_prompt([make_task("1", "Odd task", deadline="not-a-date")])
        assert "- Odd task (Priority: medium, Due: None)" in prompt
