"""
Agent configuration.

Values come from the environment (optionally seeded from a .env file) and
can be overridden by CLI options:

    DOGENT_SERVER_URL       WebSocket endpoint of the control server
    DOGENT_TOKEN            authentication token
    DOGENT_SERVER_ID        identifier this agent reports to the server
    DOGENT_RECONNECT_DELAY  seconds to wait after a failed dial (default 5)
    DOGENT_CONNECT_TIMEOUT  seconds allowed for the opening handshake
    DOGENT_COMMAND_TIMEOUT  seconds a single command may run
"""

import os
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from websockets.exceptions import InvalidURI
from websockets.uri import WebSocketURI, parse_uri

from dogent.errors import ConfigError

ENV_PREFIX = "DOGENT_"

DEFAULT_SERVER_URL = "ws://localhost:8080/ws/agent"
RECONNECT_DELAY = 5.0  # seconds between dial attempts
CONNECT_TIMEOUT = 10.0
COMMAND_TIMEOUT = 300.0

_ENV_FIELDS = (
    "server_url",
    "token",
    "server_id",
    "reconnect_delay",
    "connect_timeout",
    "command_timeout",
)


class SessionConfig(BaseModel):
    """Immutable settings for a single agent process."""

    model_config = ConfigDict(frozen=True)

    server_url: str = DEFAULT_SERVER_URL
    token: str = ""
    server_id: str = ""
    reconnect_delay: float = Field(default=RECONNECT_DELAY, ge=0)
    connect_timeout: float = Field(default=CONNECT_TIMEOUT, gt=0)
    command_timeout: float = Field(default=COMMAND_TIMEOUT, gt=0)

    @classmethod
    def from_env(
        cls, env_file: str | Path | None = None, **overrides: Any
    ) -> "SessionConfig":
        """Build a config from DOGENT_* variables; non-None overrides win.

        Raises:
            ConfigError: If a value fails validation.
        """
        if env_file is not None:
            if not Path(env_file).is_file():
                raise ConfigError(f"Env file not found: {env_file}")
            load_dotenv(env_file, override=False)
        else:
            dotenv_path = find_dotenv(usecwd=True)
            if dotenv_path:
                load_dotenv(dotenv_path, override=False)

        values: dict[str, Any] = {}
        for field in _ENV_FIELDS:
            raw = os.environ.get(f"{ENV_PREFIX}{field.upper()}")
            if raw is not None:
                values[field] = raw

        values.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def endpoint(self) -> WebSocketURI:
        """Parse and validate ``server_url``.

        Raises:
            ConfigError: If the URL is not a well-formed ws:// or wss:// URI.
        """
        try:
            return parse_uri(self.server_url)
        except (InvalidURI, ValueError) as e:
            raise ConfigError(f"Invalid server URL {self.server_url!r}: {e}") from e

    def redacted(self) -> dict[str, Any]:
        """Return the settings as a dict with the token masked."""
        data = self.model_dump()
        if data["token"]:
            data["token"] = data["token"][:4] + "****" if len(data["token"]) > 8 else "****"
        return data
