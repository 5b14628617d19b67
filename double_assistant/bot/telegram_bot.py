"""
Double Assistant — Telegram Bot.

Telegram is the chat surface for Double. Every free-text message flows
through the chat's MessageDispatcher; commands cover the explicit actions
(complete a task, show stats, toggle task mode).

Security-first: when ALLOWED_USER_IDS is set, other users are silently ignored.
"""

from __future__ import annotations

import logging
from datetime import time as dt_time
from datetime import timedelta
from functools import partial, wraps
from typing import Any, Callable, Coroutine
from zoneinfo import ZoneInfo

from telegram import Bot, InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import (
    Application,
    ApplicationBuilder,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from double_assistant.adapters.telegram_notifier import TelegramNotifier
from double_assistant.config import settings
from double_assistant.core.assistant import Assistant
from double_assistant.core.dispatcher import MessageDispatcher
from double_assistant.core.responder import Reply
from double_assistant.data.db import SessionDB
from double_assistant.data.models import Task
from double_assistant.ports.notification_port import NotificationPort

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Security: silent-ignore decorator
# ---------------------------------------------------------------------------


def authorized_only(
    func: Callable[..., Coroutine[Any, Any, None]],
) -> Callable[..., Coroutine[Any, Any, None]]:
    """Decorator that silently ignores messages from unauthorized users.

    An empty ALLOWED_USER_IDS means the bot is open to everyone.
    """

    @wraps(func)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        allowed = settings.ALLOWED_USER_IDS
        user = update.effective_user
        if allowed and (user is None or user.id not in allowed):
            uid = user.id if user else "unknown"
            logger.warning("Unauthorized access attempt from user_id=%s", uid)
            return  # Silent ignore
        return await func(update, context)

    return wrapper


# ---------------------------------------------------------------------------
# Per-chat registry
# ---------------------------------------------------------------------------


class ChatRegistry:
    """One Assistant + MessageDispatcher per chat, created on first contact."""

    def __init__(self, bot: Bot, db_path: str | None = None) -> None:
        self._notifier = TelegramNotifier(bot)
        self._db_path = db_path
        self._dispatchers: dict[int, MessageDispatcher] = {}

    def get(self, chat_id: int) -> MessageDispatcher:
        dispatcher = self._dispatchers.get(chat_id)
        if dispatcher is None:
            assistant = Assistant(
                SessionDB(str(chat_id), db_path=self._db_path),
                reminder_offset=timedelta(seconds=settings.REMINDER_OFFSET_SECONDS),
                task_due_after=timedelta(hours=settings.TASK_DUE_HOURS),
            )
            dispatcher = MessageDispatcher(
                assistant,
                send=partial(_send_reply, self._notifier, chat_id),
                reply_delay=settings.REPLY_DELAY_SECONDS,
                follow_up_delay=settings.FOLLOW_UP_DELAY_SECONDS,
            )
            self._dispatchers[chat_id] = dispatcher
            logger.info("Chat %d attached (mode: %s)", chat_id, assistant.mode.value)
        return dispatcher

    def assistant(self, chat_id: int) -> Assistant:
        return self.get(chat_id).assistant

    def known_chat_ids(self) -> list[int]:
        """Chats with a stored session plus any attached this run."""
        stored = SessionDB("", db_path=self._db_path).list_keys()
        ids = {int(key) for key in stored if key.lstrip("-").isdigit()}
        ids.update(self._dispatchers)
        return sorted(ids)

    async def close_all(self) -> None:
        """Final best-effort persist, then stop every worker."""
        for chat_id, dispatcher in self._dispatchers.items():
            dispatcher.assistant.persist()
            await dispatcher.close()
            logger.debug("Chat %d detached", chat_id)
        self._dispatchers.clear()


async def _send_reply(notifier: NotificationPort, chat_id: int, reply: Reply) -> None:
    # delivery failures are logged by the notifier
    await notifier.send_message(chat_id, reply.text)


def _registry(context: ContextTypes.DEFAULT_TYPE) -> ChatRegistry:
    return context.bot_data["chats"]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@authorized_only
async def cmd_start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start — first-run greeting or welcome back."""
    dispatcher = _registry(context).get(update.effective_chat.id)
    dispatcher.submit_action(dispatcher.assistant.greet)


@authorized_only
async def cmd_help(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help — list available commands."""
    await update.message.reply_text(
        "*Available commands:*\n"
        "/tasks — List your active tasks\n"
        "/done <n> — Mark task number n as done\n"
        "/stats — Show your progress\n"
        "/mode — Switch between task mode and chat mode\n"
        "/help — Show this message\n\n"
        "Or just talk to me: send a list of tasks, ask me to remind you, "
        "or tell me how your day is going.",
        parse_mode="Markdown",
    )


def _tasks_keyboard(tasks: list[Task]) -> InlineKeyboardMarkup:
    buttons = [
        [InlineKeyboardButton(f"✅ {task.text[:40]}", callback_data=f"done:{task.id}")]
        for task in tasks
    ]
    return InlineKeyboardMarkup(buttons)


@authorized_only
async def cmd_tasks(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /tasks — list active tasks with a ✅ button each."""
    assistant = _registry(context).assistant(update.effective_chat.id)
    tasks = assistant.session.active_tasks

    if not tasks:
        await update.message.reply_text("No active tasks. Send me a list to get started!")
        return

    lines = ["Current tasks:\n"]
    for index, task in enumerate(tasks, start=1):
        lines.append(f"{index}. {task.text} (due {task.due_date:%b %d %H:%M})")
    await update.message.reply_text(
        "\n".join(lines),
        reply_markup=_tasks_keyboard(tasks),
    )


def _parse_position(args: list[str] | None) -> int | None:
    """Parse the task number of /done <n>; None when missing or invalid."""
    if not args:
        return None
    try:
        position = int(args[0])
    except ValueError:
        return None
    return position if position > 0 else None


@authorized_only
async def cmd_done(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /done <n> — complete the n-th active task."""
    position = _parse_position(context.args)
    if position is None:
        await update.message.reply_text("Usage: /done <task number>\nUse /tasks to see numbers.")
        return

    dispatcher = _registry(context).get(update.effective_chat.id)
    dispatcher.submit_action(partial(_complete_at, dispatcher.assistant, position))


def _complete_at(assistant: Assistant, position: int) -> list[Reply]:
    # resolved on the queue, after earlier messages were handled
    replies = assistant.complete_task_at(position)
    return replies or [Reply(f"There's no task number {position}. Use /tasks to check.")]


@authorized_only
async def cmd_stats(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /stats — progress summary."""
    dispatcher = _registry(context).get(update.effective_chat.id)
    dispatcher.submit_action(lambda: [dispatcher.assistant.stats_reply()])


@authorized_only
async def cmd_mode(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /mode — toggle task-adding mode."""
    dispatcher = _registry(context).get(update.effective_chat.id)
    dispatcher.submit_action(dispatcher.assistant.toggle_mode)


# ---------------------------------------------------------------------------
# Callbacks & free text
# ---------------------------------------------------------------------------


@authorized_only
async def _handle_done_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Inline ✅ button: done:<task_id>."""
    query = update.callback_query
    await query.answer()

    task_id = query.data.split(":", 1)[1]
    dispatcher = _registry(context).get(update.effective_chat.id)
    # unknown or already completed ids are a no-op inside complete_task
    dispatcher.submit_action(partial(dispatcher.assistant.complete_task, task_id))

    remaining = [t for t in dispatcher.assistant.session.active_tasks if t.id != task_id]
    await query.edit_message_reply_markup(
        reply_markup=_tasks_keyboard(remaining) if remaining else None,
    )


@authorized_only
async def handle_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Free-text messages: queue for classification and reply."""
    text = update.message.text or ""
    dispatcher = _registry(context).get(update.effective_chat.id)
    if not dispatcher.submit(text):
        logger.debug("Ignored blank message from chat %d", update.effective_chat.id)


# ---------------------------------------------------------------------------
# Application setup
# ---------------------------------------------------------------------------


async def _on_shutdown(app: Application) -> None:
    await app.bot_data["chats"].close_all()
    logger.info("All chat sessions persisted")


def build_app() -> Application:
    """Build and configure the Telegram Application with all handlers."""
    app = (
        ApplicationBuilder()
        .token(settings.TELEGRAM_BOT_TOKEN)
        .post_shutdown(_on_shutdown)
        .build()
    )
    app.bot_data["chats"] = ChatRegistry(app.bot)

    # Commands
    app.add_handler(CommandHandler("start", cmd_start))
    app.add_handler(CommandHandler("help", cmd_help))
    app.add_handler(CommandHandler("tasks", cmd_tasks))
    app.add_handler(CommandHandler("done", cmd_done))
    app.add_handler(CommandHandler("stats", cmd_stats))
    app.add_handler(CommandHandler("mode", cmd_mode))
    app.add_handler(CallbackQueryHandler(_handle_done_callback, pattern=r"^done:"))

    # Text messages (non-command)
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_text))

    _setup_checkins(app)

    logger.info("Telegram bot application built with %d handlers", len(app.handlers[0]))
    return app


def _setup_checkins(app: Application) -> None:
    """Register the daily morning and evening check-in jobs."""
    from double_assistant.core.scheduler import send_checkins

    tz = ZoneInfo(settings.TIMEZONE)
    registry: ChatRegistry = app.bot_data["chats"]

    async def _checkin_job_callback(context: ContextTypes.DEFAULT_TYPE) -> None:
        await send_checkins(registry.known_chat_ids(), registry.get, context.job.data)

    for kind, hour in (
        ("morning", settings.MORNING_CHECKIN_HOUR),
        ("evening", settings.EVENING_CHECKIN_HOUR),
    ):
        app.job_queue.run_daily(
            _checkin_job_callback,
            time=dt_time(hour=hour, minute=0, tzinfo=tz),
            data=kind,
            name=f"{kind}_checkin",
        )
        logger.info("%s check-in scheduled at %02d:00 %s", kind.capitalize(), hour, settings.TIMEZONE)


def main() -> None:
    """Entry point: build the app and start polling."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.info("Starting Double Assistant bot...")
    app = build_app()
    app.run_polling()


if __name__ == "__main__":
    main()
