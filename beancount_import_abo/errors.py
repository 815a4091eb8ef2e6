#!/usr/bin/env python3

from __future__ import annotations


class ABOError(Exception):
    """Base class for everything raised while reading an ABO statement."""

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        line_type: str | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.lineno = lineno
        self.line_type = line_type
        self.field = field

    def with_context(self, lineno: int, line_type: str) -> ABOError:
        self.lineno = lineno
        self.line_type = line_type
        return self

    def __str__(self) -> str:
        context = []
        if self.lineno is not None:
            context.append(f"line {self.lineno}")
        if self.line_type is not None:
            context.append(f"record {self.line_type}")
        if self.field is not None:
            context.append(f"field {self.field!r}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class DecodeError(ABOError, ValueError):
    """A numeric or date field could not be decoded."""


class StructuralError(ABOError):
    """A record appeared where the line sequence does not allow it."""


class CurrencyLookupError(ABOError, LookupError):
    """A variant code was not found in its table."""


class InputError(ABOError, TypeError):
    """The statement source is not text or cannot be read."""
