from cmdhandler.plugins.base import Command, FunctionCommand
from cmdhandler.plugins.registry import CommandRegistry

__all__ = ["Command", "CommandRegistry", "FunctionCommand"]
