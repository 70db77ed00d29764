"""Configuration data models"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from packaging.version import InvalidVersion, Version

from ..api.exceptions import ConfigError
from ..constants import (
    DEFAULT_API_VERSION,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_LOGIN_URL,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_QUERY_POLL_INTERVAL,
    DEFAULT_SESSION_FAULT_CODES,
    DEFAULT_SRC_DIR,
    MIN_API_VERSION,
)


def validate_api_version(api_version: Any) -> str:
    """Normalize an API version and check it is recent enough

    Raises:
        ConfigError: If the version is unparseable or below the minimum
    """
    text = str(api_version).strip()
    try:
        version = Version(text)
    except InvalidVersion:
        raise ConfigError(f"Invalid API version: {api_version!r}")

    if version < Version(MIN_API_VERSION):
        raise ConfigError(f"The API version must be >= {MIN_API_VERSION}, got {text}")

    if "." not in text:
        text = f"{text}.0"
    return text


@dataclass
class Credentials:
    """Login credentials for one org"""

    username: str
    password: str
    url: str = DEFAULT_LOGIN_URL
    api_version: str = DEFAULT_API_VERSION

    def __post_init__(self):
        """Validate credentials"""
        if not self.username:
            raise ConfigError("Credentials require a username")
        self.url = self.url.rstrip("/")
        self.api_version = validate_api_version(self.api_version)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "username": self.username,
            "password": self.password,
            "url": self.url,
            "api_version": self.api_version,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Credentials':
        """Create from dictionary"""
        return cls(
            username=data.get("username", ""),
            password=data.get("password", ""),
            url=data.get("url", DEFAULT_LOGIN_URL),
            api_version=data.get("api_version", DEFAULT_API_VERSION),
        )


@dataclass
class PollingConfig:
    """Polling behaviour for asynchronous jobs

    ``max_attempts`` and ``max_duration`` of None mean poll until a
    terminal status is reported.
    """

    interval: float = DEFAULT_POLL_INTERVAL
    max_attempts: Optional[int] = None
    max_duration: Optional[float] = None  # seconds
    query_interval: float = DEFAULT_QUERY_POLL_INTERVAL

    def __post_init__(self):
        if self.interval < 0:
            raise ConfigError("Poll interval must not be negative")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ConfigError("max_attempts must be at least 1")
        if self.max_duration is not None and self.max_duration <= 0:
            raise ConfigError("max_duration must be positive")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = {"interval": self.interval, "query_interval": self.query_interval}
        if self.max_attempts is not None:
            data["max_attempts"] = self.max_attempts
        if self.max_duration is not None:
            data["max_duration"] = self.max_duration
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PollingConfig':
        """Create from dictionary"""
        return cls(**data)


@dataclass
class ClientConfig:
    """Complete client configuration"""

    credentials: Credentials
    polling: PollingConfig = field(default_factory=PollingConfig)
    src_dir: str = DEFAULT_SRC_DIR
    session_fault_codes: List[str] = field(
        default_factory=lambda: list(DEFAULT_SESSION_FAULT_CODES)
    )
    timeout: float = DEFAULT_HTTP_TIMEOUT

    @property
    def api_version(self) -> str:
        return self.credentials.api_version

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "credentials": self.credentials.to_dict(),
            "polling": self.polling.to_dict(),
            "src_dir": self.src_dir,
            "session_fault_codes": list(self.session_fault_codes),
            "timeout": self.timeout,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ClientConfig':
        """Create from dictionary"""
        if "credentials" not in data:
            raise ConfigError("Configuration is missing a 'credentials' section")

        return cls(
            credentials=Credentials.from_dict(data["credentials"]),
            polling=PollingConfig.from_dict(data.get("polling") or {}),
            src_dir=data.get("src_dir", DEFAULT_SRC_DIR),
            session_fault_codes=list(
                data.get("session_fault_codes") or DEFAULT_SESSION_FAULT_CODES
            ),
            timeout=data.get("timeout", DEFAULT_HTTP_TIMEOUT),
        )
