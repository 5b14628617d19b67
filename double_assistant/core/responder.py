"""
Double Assistant — Response Generator.

Templated reply text for every intent and lifecycle event. Phrasing pools
are picked with an injectable `choose` callable (random.choice by default),
so tests can pin the variant. The choice is cosmetic and never touches state.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Sequence

from double_assistant.core.classifier import Intent
from double_assistant.core.task_manager import TaskManager
from double_assistant.data.models import ConversationMode, Session, Task

Chooser = Callable[[Sequence[str]], str]


@dataclass
class Reply:
    """One outgoing assistant message."""

    text: str
    is_task: bool = False     # one line of the "tasks added" burst
    follow_up: bool = False   # sent after an extra pause, like a second thought


# ---------------------------------------------------------------------------
# Phrasing pools
# ---------------------------------------------------------------------------

DISTRACTION_TEMPLATES = (
    "Hey {name}! Social media break detected 📱 How about we check your tasks first? "
    "You've got {pending} waiting!",
    "{name}, I see you mentioned social media! Quick question - have you tackled your goals today? 🎯",
    "Pause! Before diving into social feeds, let's celebrate - you have {completed} tasks completed! "
    "What's next? 💪",
    "{name}, social media will still be there after you complete your tasks! "
    "Which one should we tackle first? 🚀",
)

CONVERSATION_TEMPLATES = (
    "That's interesting, {name}! I love our chats. How are your goals coming along? 😊",
    "Thanks for sharing that with me! Speaking of progress, how's your day going? 🌟",
    "I hear you, {name}! Life's full of moments like these. What's energizing you today? ⚡️",
    "Absolutely! I'm here for both the big goals and daily conversations. What's on your mind? 💭",
    "I get it! Sometimes we just need to talk. I'm all ears - and ready to help when you need it! 🤗",
)

CELEBRATION_TEMPLATES = (
    '🎉 Boom! You crushed: "{task}"',
    '⚡️ Amazing! Task completed: "{task}"',
    '🔥 You\'re on fire! Finished: "{task}"',
    '🏆 Victory! You completed: "{task}"',
)

STATS_TEMPLATE = (
    "📊 Here's your amazing progress, {name}!\n\n"
    "✅ Completed: {completed}\n"
    "⏳ Pending: {pending}\n"
    "📈 Total: {total}\n"
    "🏆 Success Rate: {rate}%\n\n"
    "You're doing fantastic! Keep it up! 🌟"
)

DEFAULT_TEMPLATE = (
    "I'm here to help, {name}! Whether it's tasks, reminders, or just a chat - what do you need? 🚀"
)

TASK_COMPLETION_PROMPT = (
    "Awesome! Which task did you complete? You can tap the ✅ button next to it, "
    "or just tell me the task name!"
)

REMINDER_SET = "⏰ Reminder set! I'll notify you soon."
REMINDER_HELP = (
    "I'd love to set a reminder! Try saying something like 'remind me in 1 hour' "
    "or 'remind me at 3pm'"
)

GREETING = (
    "Hello! I'm Double, your personal AI assistant for growth and productivity! 🚀",
    "What's your name? I'd love to get to know you better!",
)

CAPABILITIES = (
    "🎯 Smart task planning & tracking\n"
    "⏰ Setting reminders & alarms\n"
    "📊 Progress analytics\n"
    "💪 Keeping you motivated\n"
    "🧠 Understanding when you're adding tasks vs. chatting"
)

ALL_DONE = (
    "🌟 INCREDIBLE! All tasks completed for today! You're absolutely crushing it!",
    "Ready to plan tomorrow's wins? Or just tell me how you're feeling! 😊",
)

CHECKINS = {
    "morning": "Good morning! Ready to crush today's goals? 🌅",
    "evening": "Evening check-in! How did your tasks go today? 🌙",
}

MODE_REPLIES = {
    ConversationMode.TASK_ADDING: "📝 Task mode on! Send your tasks, one per line.",
    ConversationMode.NORMAL: "💬 Chat mode on! Talk to me or add tasks anytime.",
    ConversationMode.SETUP: "Let's finish introductions first - what's your name?",
}


# ---------------------------------------------------------------------------
# Intent replies
# ---------------------------------------------------------------------------


def stats_message(session: Session) -> str:
    stats = TaskManager(session).stats()
    return STATS_TEMPLATE.format(
        name=session.user_name,
        completed=stats.completed,
        pending=stats.pending,
        total=stats.total,
        rate=stats.success_rate,
    )


def generate_response(
    intent: Intent,
    content: str,
    session: Session,
    choose: Chooser = random.choice,
) -> str:
    """Reply text for an intent that does not create tasks or finish setup.

    Returns "" for ALARM: the reminder handler produces its own reply.
    """
    name = session.user_name

    if intent is Intent.DISTRACTION:
        return choose(DISTRACTION_TEMPLATES).format(
            name=name,
            pending=len(session.active_tasks),
            completed=len(session.completed_tasks),
        )
    if intent is Intent.STATS:
        return stats_message(session)
    if intent is Intent.TASK_COMPLETION:
        return TASK_COMPLETION_PROMPT
    if intent is Intent.ALARM:
        return ""
    if intent is Intent.CONVERSATION:
        return choose(CONVERSATION_TEMPLATES).format(name=name)

    return DEFAULT_TEMPLATE.format(name=name)


# ---------------------------------------------------------------------------
# Lifecycle bursts
# ---------------------------------------------------------------------------


def greeting_replies() -> list[Reply]:
    return [Reply(text) for text in GREETING]


def welcome_back_reply(name: str) -> Reply:
    return Reply(DEFAULT_TEMPLATE.format(name=name))


def setup_replies(name: str) -> list[Reply]:
    return [
        Reply(f"Nice to meet you, {name}! 🎉"),
        Reply("I'm here to help you grow every day. My superpowers include:"),
        Reply(CAPABILITIES),
        Reply(
            "I'm pretty smart - I can tell the difference between tasks and regular "
            "conversation! Try chatting with me or tell me your tasks.",
            follow_up=True,
        ),
    ]


def tasks_added_replies(tasks: list[Task]) -> list[Reply]:
    """Confirmation burst: header, one numbered line per task, nudge."""
    if not tasks:
        return []

    plural = "s" if len(tasks) > 1 else ""
    replies = [Reply(f"Perfect! I've added {len(tasks)} task{plural} for you:")]
    replies.extend(
        Reply(f"{index}. {task.text}", is_task=True)
        for index, task in enumerate(tasks, start=1)
    )
    replies.append(Reply("I'll help you stay on track! Need to set any reminders for these? 🔔"))
    return replies


def completion_replies(task: Task, all_done: bool, choose: Chooser = random.choice) -> list[Reply]:
    replies = [Reply(choose(CELEBRATION_TEMPLATES).format(task=task.text))]
    if all_done:
        replies.extend(Reply(text, follow_up=True) for text in ALL_DONE)
    return replies


def reminder_reply(created: bool) -> Reply:
    return Reply(REMINDER_SET if created else REMINDER_HELP)


def checkin_reply(kind: str) -> Reply:
    """Daily check-in message; kind is "morning" or "evening"."""
    return Reply(CHECKINS[kind])


def mode_reply(mode: ConversationMode) -> Reply:
    """Announce the mode in effect after a /mode toggle."""
    return Reply(MODE_REPLIES[mode])
