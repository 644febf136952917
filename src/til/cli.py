"""Interactive command-line interface for Today I Learned."""

import asyncio
import uuid

from .categories import ALL_CATEGORIES, category_names
from .config import AppConfig
from .coordinator import Coordinator
from .facts import VoteType
from .form import FormBusy, FormInvalid
from .logging import configure_logger, get_logger
from .store import FactStore
from .views import View, category_tag, render_fact_list, render_form, render_header

BANNER = """
╔══════════════════════════════════════════╗
║           📚 Today I Learned             ║
║    Share and vote on short facts         ║
╚══════════════════════════════════════════╝

Commands:
  /all                 - Show facts from every category
  /cat <name>          - Filter by category
  /categories          - List categories
  /refresh             - Reload the current list
  /vote <id> <type>    - Vote: interesting, mind, false
  /share               - Open or close the fact form
  /text <fact>         - Form: set the fact text
  /source <url>        - Form: set the source link
  /category <name>     - Form: set the category
  /post                - Form: post the fact
  /help                - Show this help
  /exit, /quit         - Exit the CLI
"""


async def print_alert(message: str) -> None:
    print(f"\n⚠️  {message}")


def format_view(view: View) -> str:
    """Plain-text rendering of a view; buttons are shown as their labels."""
    lines = [view.text]
    for row in view.buttons:
        labels = [f"[{b.label}]" for b in row if not b.data.startswith("form:")]
        if labels:
            lines.append("  ".join(labels))
    return "\n".join(lines)


class CLI:
    """Interactive command-line interface over one Coordinator."""

    def __init__(
        self,
        store: FactStore | None = None,
        config: AppConfig | None = None,
    ) -> None:
        self.config = config or AppConfig.from_env()
        self.store = store or FactStore(self.config.store)
        self.chat_id = self._new_chat_id()
        self.coordinator = Coordinator(self.store, alert=print_alert, chat_id=self.chat_id)
        self.logger = get_logger()

    def _new_chat_id(self) -> str:
        """Generate a new session ID."""
        return f"cli-{uuid.uuid4().hex[:8]}"

    def _format_list(self) -> str:
        state = self.coordinator.state
        views = render_fact_list(state)
        output = ["\n" + "─" * 40, f"Category: {state.current_category}"]
        for fact, view in zip(state.facts, views):
            output.append(f"#{fact.id} {format_view(view)}")
            output.append("")
        if len(views) > len(state.facts):
            output.append(views[-1].text)
        output.append("─" * 40)
        return "\n".join(output)

    async def _vote(self, args: list[str]) -> None:
        if len(args) != 2:
            print("Usage: /vote <id> <interesting|mind|false>")
            return
        try:
            fact_id = int(args[0])
            vote_type = VoteType.parse(args[1])
        except ValueError as e:
            print(f"❌ {e}")
            return

        fact = await self.coordinator.vote(fact_id, vote_type)
        if fact is not None:
            print(
                f"✓ {vote_type.emoji} #{fact.id} now has {fact.votes(vote_type)} "
                f"{vote_type.value} votes"
            )

    async def _post(self) -> None:
        try:
            fact = await self.coordinator.submit()
        except FormInvalid as e:
            for error in e.errors:
                print(f"  - {error}")
            return
        except FormBusy as e:
            print(f"⏳ {e}")
            return

        if fact is not None:
            print(f"✓ Posted #{fact.id} in {category_tag(fact.category)}")

    def _set_field(self, name: str, value: str) -> None:
        form = self.coordinator.form
        if not self.coordinator.state.show_form:
            print("Open the form first with /share")
            return
        try:
            if name == "text":
                form.set_text(value)
            elif name == "source":
                form.set_source(value)
            else:
                form.set_category(value)
        except FormBusy as e:
            print(f"⏳ {e}")
            return
        print(format_view(render_form(form)))

    async def _handle_command(self, command: str) -> bool:
        """Handle a command. Returns True if should continue, False to exit."""
        name, _, rest = command.strip().partition(" ")
        cmd = name.lower()
        rest = rest.strip()

        if cmd in ("/exit", "/quit", "exit", "quit"):
            print("\n👋 Goodbye!")
            self.logger.log("session_end", chat_id=self.chat_id)
            return False

        if cmd == "/help":
            print(BANNER)
        elif cmd == "/all":
            await self.coordinator.set_category(ALL_CATEGORIES)
            print(self._format_list())
        elif cmd == "/cat":
            if rest not in category_names():
                print(f"Unknown category. Choose one of: {', '.join(category_names())}")
            else:
                await self.coordinator.set_category(rest)
                print(self._format_list())
        elif cmd == "/categories":
            print("\n".join(category_tag(name) for name in category_names()))
        elif cmd == "/refresh":
            await self.coordinator.refresh()
            print(self._format_list())
        elif cmd == "/vote":
            await self._vote(rest.split())
        elif cmd == "/share":
            visible = self.coordinator.toggle_form()
            print(format_view(render_form(self.coordinator.form)) if visible else "Form closed.")
        elif cmd in ("/text", "/source", "/category"):
            self._set_field(cmd[1:], rest)
        elif cmd == "/post":
            if not self.coordinator.state.show_form:
                print("Open the form first with /share")
            else:
                await self._post()
        else:
            print(f"Unknown command: {name}. Type /help.")

        return True

    async def run(self) -> None:
        """Run the interactive CLI."""
        print(BANNER)
        self.logger.set_chat_id(self.chat_id)
        self.logger.log("session_start", chat_id=self.chat_id)

        await self.coordinator.mount()
        print(format_view(render_header(self.coordinator.state)))
        print(self._format_list())

        try:
            while True:
                try:
                    user_input = (await asyncio.to_thread(input, "til> ")).strip()
                except EOFError:
                    print("\n👋 Goodbye!")
                    break

                if not user_input:
                    continue

                if not await self._handle_command(user_input):
                    break
        except KeyboardInterrupt:
            print("\n👋 Goodbye!")
        finally:
            await self.store.close()


async def run_cli() -> None:
    """Run the CLI with configuration from the environment."""
    config = AppConfig.from_env()
    configure_logger(config.log_dir)

    if not config.store.url or not config.store.key:
        print("❌ Error: SUPABASE_URL and SUPABASE_KEY must be set")
        print("Please set them in your .env file or environment")
        return

    cli = CLI(config=config)
    await cli.run()
