from __future__ import annotations


class MemvecError(Exception):
    """Base error for the vector store."""


class InvalidArgumentError(MemvecError, ValueError):
    pass


class NullInputError(MemvecError, TypeError):
    pass


class DimensionMismatchError(MemvecError, ValueError):
    pass


class ZeroNormError(MemvecError, ValueError):
    pass


class IOFailure(MemvecError):
    """
    Reading or writing a persisted store failed.

    kind is "save" or "load"; cause is the underlying exception (also set as __cause__).
    """

    def __init__(self, message: str, *, kind: str, cause: BaseException) -> None:
        super().__init__(message)
        self.kind = kind
        self.cause = cause
