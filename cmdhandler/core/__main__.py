from __future__ import annotations

import argparse
import asyncio
import sys
from textwrap import dedent

__all__ = ["cli"]

# ---------------------------------------------------------------------------+
#  Minimal CLI parser                                                         +
# ---------------------------------------------------------------------------+


def _build_parser() -> argparse.ArgumentParser:  # noqa: D401 – imperative style
    """Return a parser that understands *only* ``--help`` and ``--version``.

    ``python -m cmdhandler.core --help`` exits before discord.py is imported.
    """

    try:
        import importlib.metadata as _ilmd

        version: str = _ilmd.version("discord-cmdhandler")
    except Exception:  # pragma: no cover – metadata lookup best-effort
        version = "unknown"

    parser = argparse.ArgumentParser(
        prog="python -m cmdhandler.core",
        add_help=False,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=dedent(
            """\
            Command handler bot
            -------------------
            Run *without arguments* to start the bot from environment
            variables (DISCORD_TOKEN, PREFIX, OWNER_ID, COMMAND_PACKAGES, ...).
            """
        ),
    )
    parser.add_argument("-h", "--help", action="help", help="show this message and exit")
    parser.add_argument(
        "-V", "--version", action="version", version=f"%(prog)s {version}"
    )
    return parser


# ---------------------------------------------------------------------------+
#  Public entry-point                                                        +
# ---------------------------------------------------------------------------+


def cli(argv: list[str] | None = None) -> None:  # noqa: D401
    """Entry-point for ``python -m cmdhandler.core``."""

    _build_parser().parse_known_args(argv)  # exits on -h/-V automatically

    from cmdhandler.core.logger_setup import setup_logging

    setup_logging()
    from cmdhandler.core.launcher import launch_bot  # delayed import keeps --help fast

    asyncio.run(launch_bot())


if __name__ == "__main__":  # pragma: no cover
    try:
        cli(sys.argv[1:])
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)
