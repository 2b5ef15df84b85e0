from __future__ import annotations

# ============================================================================
# Errors
#
# Every user-facing failure is an ErdError (a ValueError). The first error
# aborts the whole parse; there is no partial diagram.
#
#   ErdError
#     ErdSyntaxError     input matches no grammar alternative
#     ErdSemanticError   valid syntax, invalid meaning
#       ErdOptionError   unknown option key or bad option value
# ============================================================================


class ErdError(ValueError):
    """Base class for errors raised while reading an ERD document."""

    def __init__(self, message: str, line: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"line {self.line}: {self.message}"


class ErdSyntaxError(ErdError):
    """The input does not match the grammar.

    Attributes:
        kind: Tag naming the construct that was expected.
        line: 1-based line of the failure.
        column: 1-based column of the failure.
        offset: 0-based character offset of the failure.
        remaining: The unparsed input starting at the failure.
    """

    def __init__(
        self,
        kind: str,
        message: str,
        *,
        line: int,
        column: int,
        offset: int,
        remaining: str,
    ) -> None:
        super().__init__(message, line)
        self.kind = kind
        self.column = column
        self.offset = offset
        self.remaining = remaining

    def __str__(self) -> str:
        near = self.remaining.splitlines()[0][:40] if self.remaining else ""
        if near:
            where = f'near "{near}"'
        elif self.remaining:
            where = "at end of line"
        else:
            where = "at end of input"
        return f"line {self.line}, column {self.column}: {self.message} {where}"


class ErdSemanticError(ErdError):
    """The input is well formed but does not describe a valid diagram."""


class ErdOptionError(ErdSemanticError):
    """An option block names an unknown key or holds a value of the wrong kind."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        group: str,
        value: str | None = None,
        line: int | None = None,
    ) -> None:
        super().__init__(message, line)
        self.key = key
        self.group = group
        self.value = value

    @classmethod
    def unknown_key(cls, key: str, group: str) -> ErdOptionError:
        return cls(f'unknown option "{key}" for {group}', key=key, group=group)

    @classmethod
    def bad_value(cls, key: str, group: str, value: str, expected: str) -> ErdOptionError:
        return cls(
            f'invalid value "{value}" for {group} option "{key}": expected {expected}',
            key=key,
            group=group,
            value=value,
        )
