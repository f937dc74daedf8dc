"""Config: environment-driven settings, handed to the app and available via DI."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Any

ENV_PREFIX = "CALLWIRE_"


class Config:
    """
    Application config. User creates their own class or instance
    and passes to Application(config=...); then available via container.resolve(type(config)).
    """

    @classmethod
    def load_from_env(cls, prefix: str = ENV_PREFIX, **defaults: Any) -> dict[str, Any]:
        """Load from os.environ with prefix and defaults. Returns dict for MyConfig(**Config.load_from_env())."""
        result = dict(defaults)
        for key, value in os.environ.items():
            if key.startswith(prefix):
                name = key[len(prefix):].lower()
                result[name] = value
        return result


@dataclass
class ServerConfig:
    """Where the RPC endpoint listens. Env: CALLWIRE_HOST, CALLWIRE_PORT, CALLWIRE_PATH, CALLWIRE_LOG_LEVEL."""

    host: str = "127.0.0.1"
    port: int = 8000
    path: str = "/rpc"
    log_level: str = "info"

    @classmethod
    def from_env(cls, prefix: str = ENV_PREFIX, **overrides: Any) -> ServerConfig:
        """Env values over field defaults; overrides that are not None win over both."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in Config.load_from_env(prefix).items() if k in known}
        values.update({k: v for k, v in overrides.items() if v is not None})
        if "port" in values:
            try:
                values["port"] = int(values["port"])
            except ValueError as e:
                raise ValueError(f"{prefix}PORT must be an integer, got {values['port']!r}") from e
        return cls(**values)
