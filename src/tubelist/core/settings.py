"""Settings management for tubelist."""

import json
import logging
import os
import tempfile
from dataclasses import asdict, dataclass, field
from pathlib import Path

from appdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "tubelist"
APP_AUTHOR = "tubelist"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
)


def get_config_dir() -> Path:
    """Get the configuration directory."""
    path = Path(user_config_dir(APP_NAME, APP_AUTHOR))
    path.mkdir(parents=True, exist_ok=True)
    return path


@dataclass
class HttpSettings:
    """Transport settings."""

    timeout_seconds: int = 30
    max_retries: int = 3
    base_delay: float = 1.0  # seconds
    max_delay: float = 10.0  # seconds
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class ClientSettings:
    """Client identification sent with every browse request."""

    client_name: str = "1"
    client_version: str = ""  # empty = resolve from youtube.com once per session
    locale: str = "en-US"


@dataclass
class ExtractorSettings:
    """Channel extractor behaviour."""

    # Continuation responses lack channel-level fields, so the channel page
    # is fetched again before every continuation page unless disabled.
    refetch_channel_on_page: bool = True


@dataclass
class Settings:
    """Application settings."""

    http: HttpSettings = field(default_factory=HttpSettings)
    client: ClientSettings = field(default_factory=ClientSettings)
    extractor: ExtractorSettings = field(default_factory=ExtractorSettings)

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        """Load settings from file."""
        if path is None:
            path = get_config_dir() / "settings.json"

        if not path.exists():
            return cls()

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            return cls._from_dict(data)
        except (json.JSONDecodeError, KeyError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable settings file {path}: {e}")
            return cls()

    def save(self, path: Path | None = None) -> None:
        """Save settings to file."""
        if path is None:
            path = get_config_dir() / "settings.json"

        path.parent.mkdir(parents=True, exist_ok=True)

        # Atomic write: write to temp file then rename to prevent corruption on crash
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp", prefix="settings_")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._to_dict(), f, indent=2)
            os.replace(tmp_path, path)  # Atomic on POSIX
        except Exception:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

    @staticmethod
    def _validate_int(value, default: int, min_val: int = 0, max_val: int | None = None) -> int:
        """Validate and constrain an integer value."""
        if not isinstance(value, int) or isinstance(value, bool):
            return default
        if value < min_val:
            return min_val
        if max_val is not None and value > max_val:
            return max_val
        return value

    @staticmethod
    def _validate_float(
        value, default: float, min_val: float = 0.0, max_val: float | None = None
    ) -> float:
        """Validate and constrain a float value."""
        if not isinstance(value, (int, float)) or isinstance(value, bool):
            return default
        value = float(value)
        if value < min_val:
            return min_val
        if max_val is not None and value > max_val:
            return max_val
        return value

    @classmethod
    def _from_dict(cls, data: dict) -> "Settings":
        """Create Settings from a dictionary with validation."""
        settings = cls()

        if "http" in data:
            h = data["http"]
            settings.http = HttpSettings(
                timeout_seconds=cls._validate_int(
                    h.get("timeout_seconds"), 30, min_val=1, max_val=300
                ),
                max_retries=cls._validate_int(h.get("max_retries"), 3, min_val=0, max_val=10),
                base_delay=cls._validate_float(h.get("base_delay"), 1.0, max_val=60.0),
                max_delay=cls._validate_float(h.get("max_delay"), 10.0, max_val=300.0),
                user_agent=h.get("user_agent") or DEFAULT_USER_AGENT,
            )

        if "client" in data:
            c = data["client"]
            settings.client = ClientSettings(
                client_name=str(c.get("client_name", "1")),
                client_version=str(c.get("client_version", "")),
                locale=c.get("locale") or "en-US",
            )

        if "extractor" in data:
            e = data["extractor"]
            settings.extractor = ExtractorSettings(
                refetch_channel_on_page=bool(e.get("refetch_channel_on_page", True)),
            )

        return settings

    def _to_dict(self) -> dict:
        """Convert settings to a dictionary."""
        return asdict(self)
