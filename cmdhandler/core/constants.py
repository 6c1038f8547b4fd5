"""
core/constants.py - Shared constants for commands and output formatting.
"""

from enum import Enum


class CommandGroup(str, Enum):
    """Default command groups. Any other upper-case label is accepted too."""

    MISC = "MISC"
    ADMIN = "ADMIN"
    MODERATIVE = "MODERATIVE"
    FUN = "FUN"
    CHAT = "CHAT"
    GAMES = "GAMES"
    INFO = "INFO"


ERROR_COLOR: int = 0xE53935

# Reserved invoke answered by the built-in help command
HELP_INVOKE: str = "help"

# Container label used in command events for direct messages
DM_LABEL: str = "DM"
