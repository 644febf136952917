"""Today I Learned entry point."""

import asyncio
import logging
import sys

from dotenv import find_dotenv, load_dotenv

from .cli import run_cli


def main() -> None:
    """Main entry point."""
    load_dotenv(find_dotenv(usecwd=True))

    if len(sys.argv) > 1 and sys.argv[1] == "bot":
        from .config import AppConfig
        from .logging import configure_logger
        from .telegram import TelegramBot

        logging.basicConfig(
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
            level=logging.INFO,
        )
        config = AppConfig.from_env()
        configure_logger(config.log_dir)

        bot = TelegramBot(config=config)
        bot.run()
        return

    asyncio.run(run_cli())


if __name__ == "__main__":
    main()
