"""Exception types raised by aldanote."""

from __future__ import annotations

from typing import Any, Sequence


class AldaNoteError(Exception):
    """Base class for every error raised by this package."""


class InvalidArgument(AldaNoteError, ValueError):
    """A constructor received a value it cannot turn into an event."""

    def __init__(self, message: str, value: Any) -> None:
        super().__init__(f"{message} (got {value!r})")
        self.value = value


class ParseFailure(AldaNoteError, ValueError):
    """Instrument-call shorthand text did not match the expected grammar."""

    def __init__(self, message: str, text: str) -> None:
        super().__init__(f"{message} (input {text!r})")
        self.text = text


class UnrenderableEvent(AldaNoteError, TypeError):
    """An object has neither a text rendering nor a Lisp form."""

    def __init__(self, obj: Any) -> None:
        super().__init__(f"Cannot render {type(obj).__name__} as alda code: {obj!r}")
        self.obj = obj


class UnsupportedVariant(AldaNoteError, TypeError):
    """An event variant has no Lisp form."""

    def __init__(self, obj: Any) -> None:
        super().__init__(f"{type(obj).__name__} has no Lisp form: {obj!r}")
        self.obj = obj


class UnknownEventType(AldaNoteError, LookupError):
    """The alda parser returned an event descriptor with no known mapping."""

    def __init__(self, descriptor: Any) -> None:
        super().__init__(f"Unknown event type: {descriptor!r}")
        self.descriptor = descriptor


class CommandFailed(AldaNoteError, RuntimeError):
    """The alda executable exited with a non-zero status or could not start."""

    def __init__(
        self,
        command: str,
        args: Sequence[str],
        exit_code: int,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        detail = stderr.strip() or stdout.strip() or f"exit status {exit_code}"
        super().__init__(f"`{command} {' '.join(args)}` failed: {detail}")
        self.command = command
        self.arguments = list(args)
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr


class ReplConnectionError(AldaNoteError, RuntimeError):
    """An operation needs an alda REPL server but none is configured."""
