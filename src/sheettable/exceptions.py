"""Custom exceptions for sheettable."""

from __future__ import annotations


class SheetTableError(Exception):
    """Base exception for all sheettable errors."""

    pass


class MissingArgumentError(SheetTableError, ValueError):
    """Raised when a required argument is absent.

    Always raised before any request is made.
    """

    def __init__(self, argument: str) -> None:
        self.argument = argument
        super().__init__(f'"{argument}" is a required argument')


class MissingCredentialError(MissingArgumentError):
    """Raised when an authorize call is made without a key."""

    pass


class MalformedGridError(SheetTableError):
    """Raised when a grid response cannot be shaped into a table.

    Covers a grid with no header row and a response that lacks the sheet
    a requested range points at.
    """

    def __init__(self, message: str = "Grid has no header row") -> None:
        super().__init__(message)
