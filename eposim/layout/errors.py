"""Exceptions raised inside the layout pass."""

from typing import Optional

from eposim.model.command import PrintCommand


class LayoutError(Exception):
    """Base class for layout errors."""


class InvalidCommandError(LayoutError):
    """
    A command is missing mandatory data or carries an unparseable mandatory
    attribute. The engine catches it and skips the command.
    """

    def __init__(
        self,
        message: str,
        command: Optional[PrintCommand] = None,
        attribute: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.command = command
        self.attribute = attribute


__all__ = ["LayoutError", "InvalidCommandError"]
