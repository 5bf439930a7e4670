"""Courier: normalized failures for async HTTP calls.

Public API:
    - RequestExecutor: run a request thunk under one of three call conventions
    - Failure / FailureKind: the closed, caller-facing failure vocabulary
    - Ok / Err / Result: tagged outcome of the non-raising convention
    - HttpTransport: httpx-based adapter raising TransportError kinds
    - TransportConfig: configuration dataclass
"""

from __future__ import annotations

import logging

from courier.config import TransportConfig
from courier.errors import (
    BadCertificateError,
    BadResponseError,
    ConfigurationError,
    ConnectionTimeoutError,
    CourierError,
    ReceiveTimeoutError,
    RequestCancelledError,
    SendTimeoutError,
    TransportConnectionError,
    TransportError,
    UnknownTransportError,
)
from courier.executor import RequestExecutor, classify
from courier.failures import (
    BadCertificateFailure,
    BadResponseFailure,
    CancelledFailure,
    ConnectionErrorFailure,
    ConnectionTimeoutFailure,
    Failure,
    FailureKind,
    ReceiveTimeoutFailure,
    SendTimeoutFailure,
    UnknownFailure,
)
from courier.result import Err, Ok, Result
from courier.transport import CancelToken, HttpTransport, Transport, map_transport_error

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("courier-http")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("courier").addHandler(logging.NullHandler())

__all__ = [
    "BadCertificateError",
    "BadCertificateFailure",
    "BadResponseError",
    "BadResponseFailure",
    "CancelToken",
    "CancelledFailure",
    "ConfigurationError",
    "ConnectionErrorFailure",
    "ConnectionTimeoutError",
    "ConnectionTimeoutFailure",
    "CourierError",
    "Err",
    "Failure",
    "FailureKind",
    "HttpTransport",
    "Ok",
    "ReceiveTimeoutError",
    "ReceiveTimeoutFailure",
    "RequestCancelledError",
    "RequestExecutor",
    "Result",
    "SendTimeoutError",
    "SendTimeoutFailure",
    "Transport",
    "TransportConfig",
    "TransportConnectionError",
    "TransportError",
    "UnknownFailure",
    "UnknownTransportError",
    "classify",
    "map_transport_error",
]
