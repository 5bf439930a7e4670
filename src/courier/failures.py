"""Failure vocabulary: the closed set of caller-facing request failures.

Every error that leaves the request executor is expressed as a ``Failure``.
Kinds are fixed; adding one is a breaking change.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar


class FailureKind(str, Enum):
    """Normalized failure categories shared by transport errors and failures."""

    CONNECTION_TIMEOUT = "connection_timeout"
    SEND_TIMEOUT = "send_timeout"
    RECEIVE_TIMEOUT = "receive_timeout"
    BAD_CERTIFICATE = "bad_certificate"
    BAD_RESPONSE = "bad_response"
    CANCELLED = "cancelled"
    CONNECTION_ERROR = "connection_error"
    UNKNOWN = "unknown"

    @property
    def default_title(self) -> str:
        """Short human label for this kind."""
        return _DEFAULT_TEXT[self][0]

    @property
    def default_message(self) -> str:
        """Human-readable description used when no override is given."""
        return _DEFAULT_TEXT[self][1]


# Presentation defaults; reproduced verbatim in user-facing surfaces.
_DEFAULT_TEXT: dict[FailureKind, tuple[str, str]] = {
    FailureKind.CONNECTION_TIMEOUT: ("Connection Timeout", "Connection timed out."),
    FailureKind.SEND_TIMEOUT: ("Send Timeout", "Send request timed out."),
    FailureKind.RECEIVE_TIMEOUT: ("Receive Timeout", "Receive response timed out."),
    FailureKind.BAD_CERTIFICATE: ("Bad Certificate", "Bad certificate received."),
    FailureKind.BAD_RESPONSE: ("Bad Response", "Bad response received from server."),
    FailureKind.CANCELLED: ("Request Cancelled", "Request was cancelled."),
    FailureKind.CONNECTION_ERROR: ("Connection Error", "Connection error occurred."),
    FailureKind.UNKNOWN: ("Unknown Error", "Unknown error occurred."),
}

_FAILURE_TYPES: dict[FailureKind, type[Failure]] = {}


class Failure(Exception):
    """A normalized, user-presentable request failure.

    Failures are values: ``kind``, ``title`` and ``message`` are read-only and
    two failures compare equal when all three match. They are also exceptions
    so the raising call conventions can surface them directly.

    Example:
        failure = Failure(FailureKind.SEND_TIMEOUT)
        assert failure.title == "Send Timeout"
        assert failure.message == "Send request timed out."
    """

    def __init__(self, kind: FailureKind | str, message: str | None = None) -> None:
        resolved = FailureKind(kind)
        text = message or resolved.default_message
        super().__init__(text)
        self._kind = resolved
        self._title = resolved.default_title
        self._message = text

    @property
    def kind(self) -> FailureKind:
        """Failure category."""
        return self._kind

    @property
    def title(self) -> str:
        """Short human label; always the default for ``kind``."""
        return self._title

    @property
    def message(self) -> str:
        """Human-readable description; the kind default unless overridden."""
        return self._message

    @classmethod
    def from_kind(cls, kind: FailureKind | str) -> Failure:
        """Build the default failure for *kind* using its dedicated subclass."""
        resolved = FailureKind(kind)
        return _FAILURE_TYPES[resolved]()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Failure):
            return NotImplemented
        return (self.kind, self.title, self.message) == (
            other.kind,
            other.title,
            other.message,
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.title, self.message))

    def __str__(self) -> str:
        return self._message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"

    def __reduce__(self) -> tuple[Any, ...]:
        return (Failure, (self.kind, self.message))


class _KindFailure(Failure):
    """Failure subclass pinned to a single kind."""

    fixed_kind: ClassVar[FailureKind]

    def __init_subclass__(cls, *, kind: FailureKind | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if kind is not None:
            cls.fixed_kind = kind
            _FAILURE_TYPES[kind] = cls

    def __init__(self, message: str | None = None) -> None:
        super().__init__(self.fixed_kind, message)

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self.message,))


class ConnectionTimeoutFailure(_KindFailure, kind=FailureKind.CONNECTION_TIMEOUT):
    """The connection could not be established in time."""


class SendTimeoutFailure(_KindFailure, kind=FailureKind.SEND_TIMEOUT):
    """Sending the request body timed out."""


class ReceiveTimeoutFailure(_KindFailure, kind=FailureKind.RECEIVE_TIMEOUT):
    """Waiting for the response timed out."""


class BadCertificateFailure(_KindFailure, kind=FailureKind.BAD_CERTIFICATE):
    """The server certificate failed verification."""


class BadResponseFailure(_KindFailure, kind=FailureKind.BAD_RESPONSE):
    """The server answered with an unacceptable or malformed response."""


class CancelledFailure(_KindFailure, kind=FailureKind.CANCELLED):
    """The request was cancelled before it completed."""


class ConnectionErrorFailure(_KindFailure, kind=FailureKind.CONNECTION_ERROR):
    """The connection failed or dropped."""


class UnknownFailure(_KindFailure, kind=FailureKind.UNKNOWN):
    """Anything that does not fit another kind."""


__all__ = [
    "BadCertificateFailure",
    "BadResponseFailure",
    "CancelledFailure",
    "ConnectionErrorFailure",
    "ConnectionTimeoutFailure",
    "Failure",
    "FailureKind",
    "ReceiveTimeoutFailure",
    "SendTimeoutFailure",
    "UnknownFailure",
]
