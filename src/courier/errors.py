"""Exception hierarchy for Courier."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from courier.failures import FailureKind

if TYPE_CHECKING:
    from collections.abc import Iterator


class CourierError(Exception):
    """Base exception for all Courier errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(CourierError):
    """Configuration validation or resolution failed."""


_TRANSPORT_ERROR_TYPES: dict[FailureKind, type[TransportError]] = {}


class TransportError(CourierError):
    """A transport call failed in one of the known ways.

    Raised by the HTTP adapter and consumed by the request executor. The
    low-level exception is chained as ``__cause__``. ``status_code`` is
    ancillary detail; classification only looks at ``kind``.
    """

    fixed_kind: ClassVar[FailureKind | None] = None

    def __init_subclass__(cls, *, kind: FailureKind | None = None, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if kind is not None:
            cls.fixed_kind = kind
            _TRANSPORT_ERROR_TYPES[kind] = cls

    def __init__(
        self,
        kind: FailureKind | str,
        message: str | None = None,
        *,
        status_code: int | None = None,
        method: str | None = None,
        url: str | None = None,
        hint: str | None = None,
    ) -> None:
        resolved = FailureKind(kind)
        super().__init__(message or resolved.default_message, hint=hint)
        self._kind = resolved
        self._status_code = status_code
        self._method = method
        self._url = url

    @property
    def kind(self) -> FailureKind:
        """Transport failure category."""
        return self._kind

    @property
    def status_code(self) -> int | None:
        """HTTP status, when the failure came with a response."""
        return self._status_code

    @property
    def method(self) -> str | None:
        return self._method

    @property
    def url(self) -> str | None:
        return self._url

    @classmethod
    def for_kind(
        cls,
        kind: FailureKind | str,
        message: str | None = None,
        *,
        status_code: int | None = None,
        method: str | None = None,
        url: str | None = None,
    ) -> TransportError:
        """Construct the dedicated subclass for *kind*."""
        err_cls = _TRANSPORT_ERROR_TYPES[FailureKind(kind)]
        return err_cls(message, status_code=status_code, method=method, url=url)

    def __reduce__(self) -> tuple[Any, ...]:
        return (
            _rebuild_transport_error,
            (type(self), self.kind, str(self), self.status_code, self.method, self.url),
        )


def _rebuild_transport_error(
    err_cls: type[TransportError],
    kind: FailureKind,
    message: str,
    status_code: int | None,
    method: str | None,
    url: str | None,
) -> TransportError:
    if err_cls.fixed_kind is None:
        return err_cls(kind, message, status_code=status_code, method=method, url=url)
    return err_cls(message, status_code=status_code, method=method, url=url)  # type: ignore[arg-type]


class _KindTransportError(TransportError):
    """Transport error pinned to a single kind."""

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        method: str | None = None,
        url: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(
            self.fixed_kind,  # type: ignore[arg-type]
            message,
            status_code=status_code,
            method=method,
            url=url,
            hint=hint,
        )


class ConnectionTimeoutError(_KindTransportError, kind=FailureKind.CONNECTION_TIMEOUT):
    """Connecting (or acquiring a pooled connection) timed out."""


class SendTimeoutError(_KindTransportError, kind=FailureKind.SEND_TIMEOUT):
    """Writing the request timed out."""


class ReceiveTimeoutError(_KindTransportError, kind=FailureKind.RECEIVE_TIMEOUT):
    """Reading the response timed out."""


class BadCertificateError(_KindTransportError, kind=FailureKind.BAD_CERTIFICATE):
    """TLS certificate verification failed."""


class BadResponseError(_KindTransportError, kind=FailureKind.BAD_RESPONSE):
    """Unacceptable status code or malformed response."""


class RequestCancelledError(_KindTransportError, kind=FailureKind.CANCELLED):
    """The request was cancelled through its cancel token."""


class TransportConnectionError(_KindTransportError, kind=FailureKind.CONNECTION_ERROR):
    """Network-level failure while connecting or exchanging data."""


class UnknownTransportError(_KindTransportError, kind=FailureKind.UNKNOWN):
    """A transport failure that fits no other kind."""


def _walk_exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield *exc* and its ``__cause__``/``__context__`` chain, with cycle protection."""
    seen: set[int] = set()
    stack: list[BaseException] = [exc]
    while stack:
        cur = stack.pop()
        if id(cur) in seen:
            continue
        seen.add(id(cur))
        yield cur

        cause = cur.__cause__
        if isinstance(cause, BaseException):
            stack.append(cause)
        context = cur.__context__
        if isinstance(context, BaseException):
            stack.append(context)
