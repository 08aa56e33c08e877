"""Glance configuration.

GlanceConfig is the central configuration object, frozen after creation.
"""

import ipaddress
from dataclasses import dataclass
from pathlib import Path

from glance._errors import ConfigError

_INT_FIELDS = ("port", "debounce_ms", "poll_interval_ms")
_BOOL_FIELDS = ("hard_breaks", "force_polling")


def _is_loopback(host: str) -> bool:
    if host == "localhost":
        return True
    try:
        return ipaddress.ip_address(host).is_loopback
    except ValueError:
        return False


@dataclass(frozen=True, slots=True)
class GlanceConfig:
    """Configuration for a glance preview server.

    Attributes:
        source: Path to the markdown file being previewed.
                Always resolved to an absolute path on construction.
        host: Loopback bind address.
        port: Bind port.
        debounce_ms: Window in which bursts of filesystem events for one
            edit are coalesced into a single commit.
        poll_interval_ms: How often the browser asks ``/updates`` for a newer
            version.  Also the mtime polling period when ``force_polling``
            is set.
        hard_breaks: Render single newlines inside a paragraph as ``<br>``.
        force_polling: Watch by polling modification times instead of OS
            filesystem notifications.

    """

    source: Path
    host: str = "127.0.0.1"
    port: int = 8000
    debounce_ms: int = 100
    poll_interval_ms: int = 1000
    hard_breaks: bool = True
    force_polling: bool = False

    def __post_init__(self) -> None:
        # Watcher events are compared against this exact path.
        object.__setattr__(self, "source", Path(self.source).resolve())

        if not isinstance(self.host, str):
            msg = f"host must be a string, got {self.host!r}"
            raise ConfigError(msg)
        for name in _INT_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                msg = f"{name} must be an integer, got {value!r}"
                raise ConfigError(msg)
        for name in _BOOL_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, bool):
                msg = f"{name} must be true or false, got {value!r}"
                raise ConfigError(msg)

        if not _is_loopback(self.host):
            msg = f"host must be a loopback address, got {self.host!r}"
            raise ConfigError(msg)
        if not 0 <= self.port <= 65535:
            msg = f"port out of range: {self.port}"
            raise ConfigError(msg)
        if self.debounce_ms <= 0:
            msg = f"debounce_ms must be positive, got {self.debounce_ms}"
            raise ConfigError(msg)
        if self.poll_interval_ms <= 0:
            msg = f"poll_interval_ms must be positive, got {self.poll_interval_ms}"
            raise ConfigError(msg)

    @property
    def title(self) -> str:
        """Page title: the absolute source path."""
        return str(self.source)

    @property
    def url(self) -> str:
        """Address the preview is served on."""
        return f"http://{self.host}:{self.port}"
