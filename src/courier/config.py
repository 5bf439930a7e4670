"""Configuration: frozen transport settings with environment fallbacks."""

from __future__ import annotations

from collections.abc import Mapping  # noqa: TC003 - used at runtime in dataclass
from dataclasses import dataclass, field
import math
import os
import re
from types import MappingProxyType

from dotenv import load_dotenv
import httpx

from courier.errors import ConfigurationError

load_dotenv()

BASE_URL_ENV = "COURIER_BASE_URL"
_TIMEOUT_ENV_VARS: dict[str, str] = {
    "connect_timeout_s": "COURIER_CONNECT_TIMEOUT_S",
    "send_timeout_s": "COURIER_SEND_TIMEOUT_S",
    "receive_timeout_s": "COURIER_RECEIVE_TIMEOUT_S",
}
DEFAULT_TIMEOUT_S = 10.0

_SENSITIVE_HEADER_RE = re.compile(r"authorization|cookie|token|key|secret", re.IGNORECASE)


def _env_timeout(name: str) -> float | None:
    raw = os.environ.get(_TIMEOUT_ENV_VARS[name])
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT_S
    if raw.strip().lower() == "none":
        return None
    try:
        value = float(raw)
    except ValueError:
        value = math.nan
    if not math.isfinite(value):
        raise ConfigurationError(
            f"{_TIMEOUT_ENV_VARS[name]} must be a finite number, got {raw!r}",
            hint="Use seconds as a decimal number, or 'none' to disable the timeout.",
        )
    return value


@dataclass(frozen=True)
class TransportConfig:
    """Immutable settings for the HTTP transport.

    Timeouts are passed straight to ``httpx``; ``None`` disables one. Unset
    values fall back to ``COURIER_*`` environment variables, then to defaults.

    Example:
        config = TransportConfig(base_url="https://api.example.com")
        # connect/send/receive timeouts default to COURIER_*_TIMEOUT_S or 10s
    """

    #: Auto-resolved from ``COURIER_BASE_URL`` when empty.
    base_url: str = ""
    connect_timeout_s: float | None = field(
        default_factory=lambda: _env_timeout("connect_timeout_s")
    )
    send_timeout_s: float | None = field(
        default_factory=lambda: _env_timeout("send_timeout_s")
    )
    receive_timeout_s: float | None = field(
        default_factory=lambda: _env_timeout("receive_timeout_s")
    )
    headers: Mapping[str, str] = field(default_factory=dict, hash=False)
    verify_ssl: bool = True
    follow_redirects: bool = False
    #: Inclusive range of statuses treated as success.
    success_statuses: tuple[int, int] = (200, 299)

    def __post_init__(self) -> None:
        """Resolve environment fallbacks and validate configuration."""
        if not self.base_url:
            object.__setattr__(self, "base_url", os.environ.get(BASE_URL_ENV, ""))

        for name in _TIMEOUT_ENV_VARS:
            value = getattr(self, name)
            if value is not None and not (math.isfinite(value) and value >= 0):
                raise ConfigurationError(
                    f"{name} must be a finite number ≥ 0 or None, got {value}",
                    hint="Timeouts are in seconds; pass None to disable one.",
                )

        lo, hi = self.success_statuses
        if not (100 <= lo <= hi <= 599):
            raise ConfigurationError(
                f"success_statuses must satisfy 100 ≤ low ≤ high ≤ 599, got {self.success_statuses}",
                hint="The default (200, 299) accepts any 2xx response.",
            )

        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    def timeout(self) -> httpx.Timeout:
        """Build the ``httpx`` timeout for these settings."""
        return httpx.Timeout(
            connect=self.connect_timeout_s,
            write=self.send_timeout_s,
            read=self.receive_timeout_s,
            pool=self.connect_timeout_s,
        )

    def is_success(self, status_code: int) -> bool:
        lo, hi = self.success_statuses
        return lo <= status_code <= hi

    def __str__(self) -> str:
        """Return a redacted, developer-friendly representation."""
        headers = {
            k: "[REDACTED]" if _SENSITIVE_HEADER_RE.search(k) else v
            for k, v in self.headers.items()
        }
        return (
            f"TransportConfig(base_url={self.base_url!r}, "
            f"connect_timeout_s={self.connect_timeout_s}, "
            f"send_timeout_s={self.send_timeout_s}, "
            f"receive_timeout_s={self.receive_timeout_s}, headers={headers!r}, "
            f"verify_ssl={self.verify_ssl}, follow_redirects={self.follow_redirects})"
        )

    __repr__ = __str__
