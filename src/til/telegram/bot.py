"""Telegram bot front end for Today I Learned."""

import logging
import os

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.constants import ParseMode
from telegram.error import BadRequest
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from ..categories import category_names
from ..config import AppConfig
from ..facts import VoteType
from ..form import FormBusy, FormInvalid
from ..logging import get_logger
from ..session import Session, SessionConfig, SessionManager
from ..state import CloseForm
from ..store import FactStore
from ..validation import is_valid_http_url
from ..views import (
    View,
    category_filters,
    render_count,
    render_fact,
    render_fact_list,
    render_form,
    render_header,
)

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = """
📚 *Today I Learned*

Browse short facts shared by the community, vote on them and share your own.

*Commands:*
/facts - Show facts for the current category
/share - Open or close the fact form
/close - Close the fact form
/help - Show this message

Pick a category below to filter the list.
"""

NOOP_DATA = "noop"
MAX_MESSAGE_LENGTH = 4096


def to_markup(view: View) -> InlineKeyboardMarkup | None:
    """Convert a view's buttons to an inline keyboard.

    Telegram has no disabled buttons: disabled ones keep their label but send
    a no-op callback.
    """
    if not view.buttons:
        return None

    return InlineKeyboardMarkup(
        [
            [
                InlineKeyboardButton(
                    f"⏳ {button.label}" if button.disabled else button.label,
                    callback_data=NOOP_DATA if button.disabled else button.data,
                )
                for button in row
            ]
            for row in view.buttons
        ]
    )


def truncate_message(text: str, max_length: int = MAX_MESSAGE_LENGTH) -> str:
    """Truncate message to fit Telegram limits."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 20] + "\n... [truncated]"


def parse_vote_data(data: str) -> tuple[int, VoteType]:
    """Split ``vote:<id>:<column>`` callback data."""
    _, fact_id, column = data.split(":", 2)
    return int(fact_id), VoteType.parse(column)


class TelegramBot:
    """Telegram bot for Today I Learned."""

    def __init__(
        self,
        token: str | None = None,
        config: AppConfig | None = None,
        store: FactStore | None = None,
    ) -> None:
        self.token = token or os.getenv("TELEGRAM_TOKEN")
        if not self.token:
            raise ValueError("TELEGRAM_TOKEN not set")

        self.config = config or AppConfig.from_env()
        self.store = store or FactStore(self.config.store)
        self.sessions = SessionManager(
            self.store,
            SessionConfig(ttl_seconds=self.config.session_ttl),
            alert_factory=self._make_alert,
        )
        self.json_logger = get_logger()
        self._app: Application | None = None

    def _make_alert(self, chat_id: str):
        """Alert callable for a chat: a warning message in that chat."""

        async def alert(message: str) -> None:
            self.json_logger.log("alert", chat_id=chat_id, message=message)
            if self._app is None:
                logger.warning("Alert for %s with no running app: %s", chat_id, message)
                return
            await self._app.bot.send_message(chat_id=int(chat_id), text=f"⚠️ {message}")

        return alert

    def _get_chat_id(self, update: Update) -> str:
        """Get chat_id as string from update."""
        assert update.effective_chat is not None
        return str(update.effective_chat.id)

    async def _send_view(
        self, context: ContextTypes.DEFAULT_TYPE, chat_id: str, view: View
    ) -> int:
        message = await context.bot.send_message(
            chat_id=int(chat_id),
            text=truncate_message(view.text),
            reply_markup=to_markup(view),
        )
        return message.message_id

    async def _send_list(
        self, context: ContextTypes.DEFAULT_TYPE, session: Session
    ) -> None:
        """Send the current fact list, one message per fact."""
        state = session.coordinator.state
        views = render_fact_list(state)

        if not state.facts or state.is_loading:
            await self._send_view(context, session.chat_id, views[0])
            return

        limit = self.config.max_rendered_facts
        for view in views[: min(limit, len(state.facts))]:
            await self._send_view(context, session.chat_id, view)

        footer = render_count(state.facts)
        if len(state.facts) > limit:
            footer = f"Showing the first {limit}. {footer}"
        await self._send_view(context, session.chat_id, View(text=footer))

    async def _send_form(
        self, context: ContextTypes.DEFAULT_TYPE, session: Session
    ) -> None:
        view = render_form(session.coordinator.form)
        session.form_message_id = await self._send_view(context, session.chat_id, view)

    async def _edit_form(
        self, context: ContextTypes.DEFAULT_TYPE, session: Session
    ) -> None:
        """Redraw the form message, or send a new one if there is none."""
        if session.form_message_id is None:
            await self._send_form(context, session)
            return

        view = render_form(session.coordinator.form)
        try:
            await context.bot.edit_message_text(
                chat_id=int(session.chat_id),
                message_id=session.form_message_id,
                text=truncate_message(view.text),
                reply_markup=to_markup(view),
            )
        except BadRequest as e:
            logger.debug("Form message not edited: %s", e)

    async def _handle_start(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /start command."""
        assert update.message is not None
        chat_id = self._get_chat_id(update)
        self.json_logger.log("telegram_start", chat_id=chat_id)

        await update.message.reply_text(WELCOME_MESSAGE, parse_mode=ParseMode.MARKDOWN)

        session = await self.sessions.get_mounted(chat_id)
        await self._send_view(context, chat_id, render_header(session.coordinator.state))
        await self._send_view(context, chat_id, category_filters())
        await self._send_list(context, session)

    async def _handle_help(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /help command."""
        assert update.message is not None
        await update.message.reply_text(WELCOME_MESSAGE, parse_mode=ParseMode.MARKDOWN)

    async def _handle_facts(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /facts command."""
        chat_id = self._get_chat_id(update)
        session = await self.sessions.get_mounted(chat_id)
        await self._send_view(context, chat_id, category_filters())
        await self._send_list(context, session)

    async def _toggle_form(
        self, context: ContextTypes.DEFAULT_TYPE, session: Session
    ) -> None:
        if session.coordinator.toggle_form():
            await self._send_form(context, session)
        else:
            session.form_message_id = None
            await self._send_view(
                context, session.chat_id, render_header(session.coordinator.state)
            )

    async def _handle_share(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /share command."""
        chat_id = self._get_chat_id(update)
        session = await self.sessions.get_mounted(chat_id)
        await self._toggle_form(context, session)

    async def _handle_close(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Handle /close command."""
        assert update.message is not None
        chat_id = self._get_chat_id(update)
        session = await self.sessions.get_mounted(chat_id)
        session.coordinator.dispatch(CloseForm())
        session.form_message_id = None
        await update.message.reply_text("Form closed.")

    async def _handle_message(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Plain messages fill the open form: links go to source, the rest to text."""
        assert update.message is not None
        assert update.message.text is not None

        chat_id = self._get_chat_id(update)
        session = await self.sessions.get_mounted(chat_id)
        coordinator = session.coordinator

        if not coordinator.state.show_form:
            await update.message.reply_text("Use /share to post a fact or /facts to browse.")
            return

        message = update.message.text.strip()
        try:
            if is_valid_http_url(message):
                coordinator.form.set_source(message)
            else:
                coordinator.form.set_text(message)
        except FormBusy as e:
            await update.message.reply_text(f"⏳ {e}")
            return

        await self._send_form(context, session)

    async def _handle_callback(
        self, update: Update, context: ContextTypes.DEFAULT_TYPE
    ) -> None:
        """Dispatch inline button presses."""
        query = update.callback_query
        assert query is not None
        data = query.data or ""
        chat_id = self._get_chat_id(update)
        session = await self.sessions.get_mounted(chat_id)

        try:
            if data == NOOP_DATA:
                await query.answer("Please wait...")
            elif data.startswith("cat:"):
                await query.answer()
                await self._select_category(context, session, data[len("cat:"):])
            elif data.startswith("vote:"):
                await self._vote(update, context, session, data)
            elif data.startswith("form:"):
                await self._form_action(update, context, session, data[len("form:"):])
            else:
                await query.answer()
        except Exception as e:
            logger.exception("Error handling callback %s", data)
            self.json_logger.log("telegram_error", chat_id=chat_id, error=str(e))
            await context.bot.send_message(chat_id=int(chat_id), text=f"❌ Error: {e}")

    async def _select_category(
        self, context: ContextTypes.DEFAULT_TYPE, session: Session, category: str
    ) -> None:
        coordinator = session.coordinator
        await coordinator.set_category(category)

        # A newer selection is still loading and will send its own list.
        if coordinator.state.is_loading:
            return
        await self._send_list(context, session)

    async def _vote(
        self,
        update: Update,
        context: ContextTypes.DEFAULT_TYPE,
        session: Session,
        data: str,
    ) -> None:
        query = update.callback_query
        assert query is not None
        fact_id, vote_type = parse_vote_data(data)
        item = session.coordinator.item(fact_id)

        if item.is_updating:
            await query.answer(item.BUSY_MESSAGE, show_alert=True)
            return
        await query.answer()

        fact = session.coordinator.get_fact(fact_id)
        if fact is not None:
            try:
                await query.edit_message_reply_markup(
                    reply_markup=to_markup(render_fact(fact, is_updating=True))
                )
            except BadRequest as e:
                logger.debug("Vote buttons not disabled: %s", e)

        updated = await session.coordinator.vote(fact_id, vote_type)
        fact = updated or session.coordinator.get_fact(fact_id)
        if fact is None:
            return

        view = render_fact(fact)
        try:
            await query.edit_message_text(
                text=truncate_message(view.text), reply_markup=to_markup(view)
            )
        except BadRequest as e:
            logger.debug("Fact message not edited: %s", e)

    async def _form_action(
        self,
        update: Update,
        context: ContextTypes.DEFAULT_TYPE,
        session: Session,
        action: str,
    ) -> None:
        query = update.callback_query
        assert query is not None
        coordinator = session.coordinator

        if action == "toggle":
            await query.answer()
            await self._toggle_form(context, session)
            return

        if not coordinator.state.show_form:
            await query.answer("The form is closed. Use /share to open it.", show_alert=True)
            return

        if action == "close":
            await query.answer()
            coordinator.dispatch(CloseForm())
            session.form_message_id = None
            await query.edit_message_text("Form closed.")
            return

        if action.startswith("cat:"):
            category = action[len("cat:"):]
            if category not in category_names():
                await query.answer(f"Unknown category: {category}", show_alert=True)
                return
            try:
                coordinator.form.set_category(category)
            except FormBusy as e:
                await query.answer(str(e), show_alert=True)
                return
            await query.answer()
            session.form_message_id = query.message.message_id if query.message else None
            await self._edit_form(context, session)
            return

        if action == "post":
            await self._post(update, context, session)
            return

        await query.answer()

    async def _post(
        self,
        update: Update,
        context: ContextTypes.DEFAULT_TYPE,
        session: Session,
    ) -> None:
        query = update.callback_query
        assert query is not None
        coordinator = session.coordinator

        if coordinator.form.is_uploading:
            await query.answer("Your fact is still being posted", show_alert=True)
            return
        errors = coordinator.form.errors
        if errors:
            await query.answer("\n".join(errors), show_alert=True)
            return

        await query.answer()
        session.form_message_id = query.message.message_id if query.message else None
        await self._edit_form(context, session)

        try:
            fact = await coordinator.submit()
        except (FormBusy, FormInvalid) as e:
            await context.bot.send_message(chat_id=int(session.chat_id), text=f"⚠️ {e}")
            return

        if fact is None:
            await self._edit_form(context, session)
            return

        session.form_message_id = None
        try:
            await query.edit_message_text("✅ Fact posted!")
        except BadRequest as e:
            logger.debug("Form message not edited: %s", e)
        await self._send_view(context, session.chat_id, render_fact(fact))

    async def _post_init(self, application: Application) -> None:
        """Called after Application.initialize()."""
        self.sessions.start_cleanup_task()

    async def _post_shutdown(self, application: Application) -> None:
        """Called after Application.shutdown()."""
        self.sessions.stop_cleanup_task()
        await self.store.close()

    def build_app(self) -> Application:
        """Build the Telegram application."""
        self._app = (
            Application.builder()
            .token(self.token)
            .concurrent_updates(True)
            .post_init(self._post_init)
            .post_shutdown(self._post_shutdown)
            .build()
        )

        # Add handlers
        self._app.add_handler(CommandHandler("start", self._handle_start))
        self._app.add_handler(CommandHandler("help", self._handle_help))
        self._app.add_handler(CommandHandler("facts", self._handle_facts))
        self._app.add_handler(CommandHandler("share", self._handle_share))
        self._app.add_handler(CommandHandler("close", self._handle_close))
        self._app.add_handler(CallbackQueryHandler(self._handle_callback))
        self._app.add_handler(
            MessageHandler(filters.TEXT & ~filters.COMMAND, self._handle_message)
        )

        return self._app

    def run(self) -> None:
        """Run the bot (blocking)."""
        app = self.build_app()

        logger.info("Starting Telegram bot...")
        app.run_polling()
