#!/usr/bin/env python
"""
plugins/registry.py
-------------------
Command registry. Maps every invoke name to the command that answers it and keeps
the list of registered command instances for help listings.

Lifecycle: commands are registered during startup, then `CmdHandler` calls
`freeze()` once the client is ready. Dispatch only reads from a frozen registry,
so no locking is needed.

Collisions: when two commands claim the same invoke name, the LAST registration
answers lookups for that name. Because that makes behaviour depend on
registration order, every collision is logged as a warning naming both commands.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Iterator
from typing import Any

from cmdhandler.core.constants import HELP_INVOKE, CommandGroup
from cmdhandler.core.exceptions import RegistrationError
from cmdhandler.plugins.base import Command, CommandFunc, FunctionCommand, normalize_group
from cmdhandler.plugins.commands.help import HelpCommand

logger = logging.getLogger(__name__)


class CommandRegistry:
    def __init__(self, default_help: Command | None = None) -> None:
        self._commands: dict[str, Command] = {}
        self._instances: list[Command] = []
        # invoke -> registration sequence number, so folding keeps "last wins"
        self._sequence: dict[str, int] = {}
        self._counter = itertools.count()
        self._frozen = False
        self.default_help: Command = default_help or HelpCommand()

    # ------------------------------------------------------------------+
    # Registration                                                      +
    # ------------------------------------------------------------------+

    def register(self, command: Command, group: str | CommandGroup | None = None) -> Command:
        """
        Register *command* under all of its invokes.

        Parameters:
          command (Command): the command instance.
          group (str | CommandGroup | None): overrides the command's own group.
        """
        if self._frozen:
            raise RegistrationError(
                f"cannot register {command!r}: registry is frozen (dispatch already started)"
            )
        if not isinstance(command, Command):
            raise RegistrationError(
                f"{type(command).__name__} must extend Command to be registered as command"
            )
        if not command.invokes:
            raise RegistrationError(f"{type(command).__name__} has no invokes")

        if group is not None:
            command.group = normalize_group(group)

        for invoke in command.invokes:
            previous = self._commands.get(invoke)
            if previous is not None and previous is not command:
                logger.warning(
                    f"Invoke '{invoke}' of {command!r} replaces {previous!r} (last registration wins)"
                )
            self._commands[invoke] = command
            self._sequence[invoke] = next(self._counter)

        if command not in self._instances:
            self._instances.append(command)
        return command

    def command(
        self,
        *invokes: str,
        group: str | CommandGroup | None = None,
        permission_level: int = 0,
        description: str = "",
        help_text: str = "",
    ) -> Callable[[CommandFunc], CommandFunc]:
        """
        Decorator to register a function (plain or async) as a command.

            @registry.command("ping", "p", group=CommandGroup.INFO)
            async def ping(ctx):
                await ctx.channel.send("pong")
        """
        if not invokes:
            raise RegistrationError("command() needs at least one invoke")

        def decorator(func: CommandFunc) -> CommandFunc:
            self.register(
                FunctionCommand(
                    func,
                    invokes,
                    description=description,
                    help_text=help_text,
                    permission_level=permission_level,
                    group=group,
                )
            )
            return func

        return decorator

    def fold_case(self) -> None:
        """
        Re-key every invoke in lower case.

        Called before freezing when parsed invokes are lower-cased, so a
        command registered as `Stats` answers `!stats`, `!Stats` and `!STATS`.
        """
        if self._frozen:
            raise RegistrationError("cannot fold invoke case: registry is frozen")
        folded: dict[str, Command] = {}
        folded_sequence: dict[str, int] = {}
        for invoke in sorted(self._commands, key=self._sequence.__getitem__):
            command = self._commands[invoke]
            key = invoke.lower()
            previous = folded.get(key)
            if previous is not None and previous is not command:
                logger.warning(
                    f"Invoke '{invoke}' of {command!r} folds onto '{key}' of {previous!r} "
                    "(last registration wins)"
                )
            folded[key] = command
            folded_sequence[key] = self._sequence[invoke]
        self._commands = folded
        self._sequence = folded_sequence

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # ------------------------------------------------------------------+
    # Lookup                                                            +
    # ------------------------------------------------------------------+

    def get(self, invoke: str) -> Command | None:
        return self._commands.get(invoke)

    def resolve(self, invoke: str) -> Command | None:
        """
        Return the command for *invoke*, the built-in help command for the
        reserved `help` invoke, or None when nothing matches.
        """
        command = self._commands.get(invoke)
        if command is not None:
            return command
        if invoke == HELP_INVOKE:
            return self.default_help
        return None

    @property
    def instances(self) -> list[Command]:
        return list(self._instances)

    @property
    def invokes(self) -> list[str]:
        return sorted(self._commands)

    def by_group(self) -> dict[str, list[Command]]:
        """Group -> commands sorted by main invoke; groups sorted by name."""
        groups: dict[str, list[Command]] = {}
        for command in self._instances:
            groups.setdefault(command.group, []).append(command)
        return {
            name: sorted(cmds, key=lambda c: c.main_invoke)
            for name, cmds in sorted(groups.items())
        }

    def __contains__(self, invoke: Any) -> bool:
        return invoke in self._commands

    def __len__(self) -> int:
        return len(self._instances)

    def __iter__(self) -> Iterator[Command]:
        return iter(list(self._instances))


# End of plugins/registry.py
