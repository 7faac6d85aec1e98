"""Domain errors raised by the booking services.

Two kinds only: the referenced entity does not exist, or it exists but a
business rule forbids the operation. The API layer maps them to 404 and 403.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    """Domain error kinds."""

    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with kind and user-safe message."""

    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class NotFoundError(DomainError):
    """Raised when an enrollment, room or booking does not exist."""

    def __init__(self) -> None:
        super().__init__(
            kind=ErrorKind.NOT_FOUND,
            message="No result for this search!",
        )


class ForbiddenError(DomainError):
    """Raised when the ticket or the room does not allow the booking."""

    def __init__(self) -> None:
        super().__init__(
            kind=ErrorKind.FORBIDDEN,
            message="No access to content!",
        )
