"""
dispatch/parser.py
------------------
Turn raw message text plus the active prefixes into an invoke name and an
argument list.

The global prefix is always tested first. When a message starts with both the
global and the guild prefix, the global prefix's length decides where the invoke
name starts.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Invocation:
    invoke: str
    args: list[str] = field(default_factory=list)
    prefix: str = ""


def match_prefix(content: str, prefix: str, guild_prefix: str | None = None) -> str | None:
    """Return the prefix *content* starts with (global first), or None."""
    if content.startswith(prefix):
        return prefix
    if guild_prefix and content.startswith(guild_prefix):
        return guild_prefix
    return None


def parse_invocation(
    content: str,
    prefix: str,
    guild_prefix: str | None = None,
    *,
    lowercase: bool = True,
) -> Invocation | None:
    """
    Parse *content* as a command invocation.

    Returns None when the text starts with neither prefix. A bare prefix gives
    an empty invoke name, which no command resolves to.

        >>> parse_invocation("?stats now", "!", "?")
        Invocation(invoke='stats', args=['now'], prefix='?')
    """
    matched = match_prefix(content, prefix, guild_prefix)
    if matched is None:
        return None

    tokens = content.split()
    if not tokens:
        return Invocation("", [], matched)

    invoke = tokens[0][len(matched):]
    if lowercase:
        invoke = invoke.lower()
    return Invocation(invoke, tokens[1:], matched)
