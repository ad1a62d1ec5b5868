import os
from dataclasses import dataclass, replace
from urllib.parse import urlparse

from dotenv import find_dotenv, load_dotenv

from amber_api.api.errors import ConfigError

DEFAULT_BASE_URL = "https://api.amber.com.au/v1"
DEFAULT_TIMEOUT = 15.0
DEFAULT_USER_AGENT = "amber-api-python"


@dataclass(frozen=True)
class ClientConfig:
    api_key: str | None = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    @property
    def is_authenticated(self) -> bool:
        return bool(self.api_key)

    def __repr__(self) -> str:
        key = "***" if self.api_key else None
        return (
            f"ClientConfig(api_key={key!r}, base_url={self.base_url!r}, "
            f"timeout={self.timeout!r}, user_agent={self.user_agent!r})"
        )


class ConfigBuilder:
    """Collects settings and produces one immutable ClientConfig.

        config = ConfigBuilder().from_env().timeout(30).build()
    """

    def __init__(self):
        self._config = ClientConfig()

    def from_env(self, dotenv: bool = True) -> "ConfigBuilder":
        """Read AMBER_API_KEY, AMBER_BASE_URL and AMBER_TIMEOUT (after loading .env)."""
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))
        api_key = os.getenv("AMBER_API_KEY", "")
        if api_key:
            self.api_key(api_key)
        base_url = os.getenv("AMBER_BASE_URL", "")
        if base_url:
            self.base_url(base_url)
        timeout = os.getenv("AMBER_TIMEOUT", "")
        if timeout:
            try:
                self.timeout(float(timeout))
            except ValueError:
                raise ConfigError(f"AMBER_TIMEOUT must be a number, got {timeout!r}") from None
        return self

    def api_key(self, value: str | None) -> "ConfigBuilder":
        self._config = replace(self._config, api_key=value or None)
        return self

    def base_url(self, value: str) -> "ConfigBuilder":
        self._config = replace(self._config, base_url=value)
        return self

    def timeout(self, seconds: float) -> "ConfigBuilder":
        self._config = replace(self._config, timeout=seconds)
        return self

    def user_agent(self, value: str) -> "ConfigBuilder":
        self._config = replace(self._config, user_agent=value)
        return self

    def build(self) -> ClientConfig:
        config = self._config
        url = urlparse(config.base_url.strip())
        if url.scheme not in ("http", "https") or not url.netloc:
            raise ConfigError(f"base_url must be an absolute http(s) URL, got {config.base_url!r}")
        if config.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {config.timeout!r}")
        if not config.user_agent:
            raise ConfigError("user_agent must not be empty")
        return replace(config, base_url=config.base_url.strip().rstrip("/"))


def config_from_env() -> ClientConfig:
    return ConfigBuilder().from_env().build()
