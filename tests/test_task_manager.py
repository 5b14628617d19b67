"""Tests for double_assistant.core.task_manager — task lifecycle and stats."""

import pytest

from double_assistant.core.task_extractor import extract_tasks
from double_assistant.core.task_manager import TaskManager, TaskStats
from double_assistant.data.models import ConversationMode


@pytest.fixture
def manager(named_session, now):
    manager = TaskManager(named_session)
    manager.add_tasks(extract_tasks("1. Buy milk\n2. Call mom", now=now))
    return manager


class TestAddTasks:
    def test_appends_to_active_and_history(self, named_session, now):
        manager = TaskManager(named_session)
        added = manager.add_tasks(extract_tasks("- Walk dog\n- Pay rent", now=now))
        assert added == 2
        assert [t.text for t in named_session.active_tasks] == ["Walk dog", "Pay rent"]
        assert [t.text for t in named_session.all_tasks] == ["Walk dog", "Pay rent"]
        assert named_session.completed_tasks == []

    def test_forces_normal_mode(self, named_session, now):
        named_session.mode = ConversationMode.TASK_ADDING
        TaskManager(named_session).add_tasks(extract_tasks("Prepare slides", now=now))
        assert named_session.mode is ConversationMode.NORMAL

    def test_zero_tasks_still_resets_mode(self, named_session):
        named_session.mode = ConversationMode.TASK_ADDING
        assert TaskManager(named_session).add_tasks([]) == 0
        assert named_session.mode is ConversationMode.NORMAL
        assert named_session.active_tasks == []


class TestCompleteTask:
    def test_moves_task_to_completed(self, manager, named_session, now):
        task = named_session.active_tasks[0]
        history_len = len(named_session.all_tasks)

        result = manager.complete_task(task.id, now=now)

        assert result is not None
        assert result.task.id == task.id
        assert result.task.completed is True
        assert result.task.completed_at == now
        assert result.all_done is False
        assert task.id not in {t.id for t in named_session.active_tasks}
        assert named_session.completed_tasks == [result.task]
        assert len(named_session.all_tasks) == history_len

    def test_history_updated_in_place(self, manager, named_session):
        first, second = named_session.all_tasks
        manager.complete_task(second.id)
        assert [t.id for t in named_session.all_tasks] == [first.id, second.id]
        assert named_session.all_tasks[1].completed is True
        assert named_session.all_tasks[0].completed is False

    def test_last_task_sets_all_done(self, manager, named_session):
        first, second = list(named_session.active_tasks)
        assert manager.complete_task(first.id).all_done is False
        assert manager.complete_task(second.id).all_done is True
        assert named_session.active_tasks == []

    def test_unknown_id_is_noop(self, manager, named_session):
        before = (list(named_session.active_tasks), list(named_session.all_tasks))
        assert manager.complete_task("does-not-exist") is None
        assert (named_session.active_tasks, named_session.all_tasks) == before
        assert named_session.completed_tasks == []

    def test_second_completion_is_noop(self, manager, named_session):
        task_id = named_session.active_tasks[0].id
        assert manager.complete_task(task_id) is not None
        assert manager.complete_task(task_id) is None
        assert len(named_session.completed_tasks) == 1
        assert len(named_session.all_tasks) == 2


class TestLookups:
    def test_active_task_at(self, manager):
        assert manager.active_task_at(1).text == "Buy milk"
        assert manager.active_task_at(2).text == "Call mom"

    def test_active_task_at_out_of_range(self, manager):
        assert manager.active_task_at(0) is None
        assert manager.active_task_at(3) is None


class TestStats:
    def test_empty_session(self, named_session):
        assert TaskManager(named_session).stats() == TaskStats(
            completed=0, pending=0, total=0, success_rate=0,
        )

    def test_counts_and_rate(self, manager, named_session):
        manager.complete_task(named_session.active_tasks[0].id)
        assert manager.stats() == TaskStats(completed=1, pending=1, total=2, success_rate=50)

    def test_rate_rounds_half_up(self, named_session, now):
        manager = TaskManager(named_session)
        manager.add_tasks(extract_tasks("\n".join(f"task number {i}" for i in range(8)), now=now))
        manager.complete_task(named_session.active_tasks[0].id)
        assert manager.stats().success_rate == 13

    def test_rate_rounds_thirds(self, named_session, now):
        manager = TaskManager(named_session)
        manager.add_tasks(extract_tasks("first one\nsecond one\nthird one", now=now))
        manager.complete_task(named_session.active_tasks[0].id)
        assert manager.stats().success_rate == 33
