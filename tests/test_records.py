"""Tests for the persisted session contract in double_assistant.data.records."""

from datetime import datetime, timedelta, timezone

from double_assistant.data.models import (
    Alarm,
    ConversationMode,
    Message,
    Priority,
    Sender,
    Session,
    Task,
)
from double_assistant.data.records import SessionRecord, record_to_session, session_to_record


def _full_session(now):
    done = Task(
        text="Buy milk", created_at=now, due_date=now + timedelta(hours=24),
        completed=True, completed_at=now + timedelta(hours=1),
    )
    pending = Task(
        text="Call mom", created_at=now, due_date=now + timedelta(hours=24),
        priority=Priority.HIGH,
    )
    return Session(
        user_name="Sam",
        is_setup=True,
        active_tasks=[pending],
        completed_tasks=[done],
        all_tasks=[done, pending],
        transcript=[
            Message(text="1. Buy milk\n2. Call mom", sender=Sender.USER, timestamp=now),
            Message(text="1. Buy milk", sender=Sender.ASSISTANT, timestamp=now, is_task=True),
        ],
        alarms=[Alarm(message="remind me in 1 hour", time=now + timedelta(minutes=1))],
        mode=ConversationMode.TASK_ADDING,
    )


class TestRoundTrip:
    def test_json_round_trip(self, now):
        session = _full_session(now)
        payload = session_to_record(session).model_dump_json()
        restored = record_to_session(SessionRecord.model_validate_json(payload))
        assert restored == session

    def test_camel_case_shape(self, now):
        data = session_to_record(_full_session(now)).model_dump(mode="json")
        assert set(data) == {
            "userName", "isSetup", "currentTasks", "completedTasks",
            "allTasks", "messages", "alarms", "conversationMode",
        }
        assert data["conversationMode"] == "task-adding"
        assert data["currentTasks"][0]["priority"] == "high"
        assert data["messages"][1]["isTask"] is True


class TestDefaults:
    def test_empty_payload(self):
        restored = record_to_session(SessionRecord.model_validate({}))
        assert restored == Session()
        assert restored.mode is ConversationMode.SETUP

    def test_partial_payload(self):
        restored = record_to_session(SessionRecord.model_validate({"userName": "Sam"}))
        assert restored.user_name == "Sam"
        assert restored.active_tasks == []
        assert restored.mode is ConversationMode.NORMAL


class TestLegacyPayload:
    def test_numeric_ids_and_persona_sender(self):
        payload = {
            "userName": "Sam",
            "isSetup": True,
            "currentTasks": [
                {"id": 1709371800000, "text": "Buy milk", "completed": False,
                 "createdAt": "2024-03-02T09:30:00Z", "priority": "urgent"},
            ],
            "messages": [
                {"id": 1, "text": "hi", "sender": "user", "timestamp": "2024-03-02T09:30:00Z"},
                {"id": 2, "text": "hello!", "sender": "double", "timestamp": "2024-03-02T09:30:01Z"},
                {"id": 3, "text": "??", "sender": "robot", "timestamp": "2024-03-02T09:30:02Z"},
            ],
        }
        restored = record_to_session(SessionRecord.model_validate(payload))

        task = restored.active_tasks[0]
        assert task.id == "1709371800000"
        assert task.priority is Priority.MEDIUM
        assert task.due_date == datetime(2024, 3, 3, 9, 30, tzinfo=timezone.utc)
        assert [m.sender for m in restored.transcript] == [Sender.USER, Sender.ASSISTANT]


class TestModeRestore:
    def test_no_name_restores_setup(self):
        record = SessionRecord(conversationMode="normal")
        assert record_to_session(record).mode is ConversationMode.SETUP

    def test_setup_never_reentered(self):
        record = SessionRecord(userName="Sam", conversationMode="setup")
        assert record_to_session(record).mode is ConversationMode.NORMAL

    def test_task_adding_kept(self):
        record = SessionRecord(userName="Sam", conversationMode="task-adding")
        assert record_to_session(record).mode is ConversationMode.TASK_ADDING

    def test_missing_mode(self):
        assert record_to_session(SessionRecord(userName="Sam")).mode is ConversationMode.NORMAL
