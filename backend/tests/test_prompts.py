"""
Tests for prompts.py - prompt templates and instant formatting.
"""
import sys
import os
from datetime import datetime, timedelta, timezone

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from prompts import (
    SINGLE_TASK_PROMPT,
    TRANSCRIPT_PROMPT,
    build_single_task_prompt,
    build_transcript_prompt,
    format_instant,
)


class TestFormatInstant:

    def test_utc_millisecond_format(self):
        moment = datetime(2025, 3, 4, 5, 6, 7, 891234, tzinfo=timezone.utc)
        assert format_instant(moment) == "2025-03-04T05:06:07.891Z"

    def test_converts_offset_to_utc(self):
        moment = datetime(2025, 3, 4, 1, 0, tzinfo=timezone(timedelta(hours=-5)))
        assert format_instant(moment) == "2025-03-04T06:00:00.000Z"


class TestSingleTaskPrompt:

    def test_template_has_placeholders(self):
        assert "{reference}" in SINGLE_TASK_PROMPT
        assert "{text}" in SINGLE_TASK_PROMPT

    def test_input_interpolated_verbatim(self):
        reference = datetime(2025, 1, 1, tzinfo=timezone.utc)
        prompt = build_single_task_prompt('Email {team} about "Q3" budget', reference)

        assert 'Task input: "Email {team} about "Q3" budget"' in prompt
        assert "Current date and time: 2025-01-01T00:00:00.000Z" in prompt

    def test_lists_priority_levels(self):
        for level in ("P1", "P2", "P3", "P4"):
            assert level in SINGLE_TASK_PROMPT


class TestTranscriptPrompt:

    def test_example_output_is_literal_json(self):
        prompt = build_transcript_prompt("Rajeev will send the deck.")

        assert '[{"name":"Take the landing page","assignee":"Aman"' in prompt
        assert "{{" not in prompt
        assert prompt.endswith("Rajeev will send the deck.")

    def test_template_has_transcript_placeholder(self):
        assert "{transcript}" in TRANSCRIPT_PROMPT
