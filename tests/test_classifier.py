"""Tests for double_assistant.core.classifier — rule-based intents."""

import pytest

from double_assistant.core.classifier import Intent, classify, is_task_message
from double_assistant.data.models import ConversationMode

NORMAL = ConversationMode.NORMAL


class TestSetupMode:
    @pytest.mark.parametrize("message", [
        "Sam",
        "add task buy milk",
        "remind me in 2 hours",
        "1. Buy milk\n2. Call mom",
    ])
    def test_everything_is_setup(self, message):
        assert classify(message, ConversationMode.SETUP) is Intent.SETUP


class TestTaskIntent:
    def test_add_task_phrase(self):
        assert classify("Please add task: water plants", NORMAL) is Intent.TASK

    def test_new_task_phrase_case_insensitive(self):
        assert classify("NEW TASK call mom", NORMAL) is Intent.TASK

    def test_add_task_wins_over_completion(self):
        assert classify("add task I finished yesterday", NORMAL) is Intent.TASK

    def test_task_adding_mode(self):
        assert classify("hello", ConversationMode.TASK_ADDING) is Intent.TASK

    def test_heuristic_intent_phrase(self):
        assert classify("I need to finish the quarterly report", NORMAL) is Intent.TASK

    def test_heuristic_keyword_colon(self):
        assert classify("Todo: buy milk", NORMAL) is Intent.TASK


class TestOtherIntents:
    def test_completion(self):
        assert classify("I completed the report", NORMAL) is Intent.TASK_COMPLETION
        assert classify("Done with laundry", NORMAL) is Intent.TASK_COMPLETION

    def test_stats(self):
        assert classify("Show me my progress", NORMAL) is Intent.STATS
        assert classify("how many tasks are left?", NORMAL) is Intent.STATS

    def test_alarm(self):
        assert classify("Remind me in 2 hours", NORMAL) is Intent.ALARM
        assert classify("set an alarm", NORMAL) is Intent.ALARM

    def test_distraction(self):
        assert classify("I was on YouTube all day", NORMAL) is Intent.DISTRACTION
        assert classify("social media is calling", NORMAL) is Intent.DISTRACTION

    def test_completion_beats_stats(self):
        assert classify("finished! what's my progress?", NORMAL) is Intent.TASK_COMPLETION

    def test_conversation(self):
        assert classify("hello there", NORMAL) is Intent.CONVERSATION

    def test_long_single_line_is_conversation(self):
        assert classify("what a lovely sunny afternoon", NORMAL) is Intent.CONVERSATION


class TestIsTaskMessage:
    def test_multiline_with_long_line(self):
        assert is_task_message("hi\nthis line is definitely long") is True

    def test_multiline_short_lines(self):
        assert is_task_message("hi\nyo") is False

    def test_blank_lines_do_not_count(self):
        # only one non-blank line: single-line rules apply, no length fallback
        assert is_task_message("\n\nwhat a lovely sunny afternoon\n   \n") is False

    def test_single_line_needs_pattern(self):
        assert is_task_message("- buy milk") is True
        assert is_task_message("buy milk") is False
