"""
Runtime Configuration

Central configuration for the file-holder service, the verifier client
and the CLI. The hash-tree engine itself takes no configuration.
"""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# Environment variable prefix
ENV_PREFIX = "BLOCKPROOF_"


@dataclass
class ServerConfig:
    """Configuration for the file-holder HTTP service."""
    host: str = "0.0.0.0"
    port: int = 8000


@dataclass
class ClientConfig:
    """Configuration for the verifier client."""
    base_url: str = "http://localhost:8000"
    timeout: float = 30.0
    # Where the client keeps the root it computed at upload time
    root_path: str = "merkle_root.txt"


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration.

    Can be loaded from:
    - Environment variables (BLOCKPROOF_ prefix)
    - JSON file (blockproof.json)
    - Programmatic construction
    """
    server: ServerConfig = field(default_factory=ServerConfig)
    client: ClientConfig = field(default_factory=ClientConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - BLOCKPROOF_HOST / BLOCKPROOF_PORT: service bind address
        - BLOCKPROOF_SERVER_URL: base URL the client talks to
        - BLOCKPROOF_TIMEOUT: client request timeout in seconds
        - BLOCKPROOF_ROOT_PATH: file the client stores its root in
        - BLOCKPROOF_LOG_LEVEL / BLOCKPROOF_LOG_FILE: logging
        """
        overrides: dict[str, Any] = {}

        if os.getenv(f"{ENV_PREFIX}HOST"):
            overrides.setdefault("server", {})["host"] = os.getenv(f"{ENV_PREFIX}HOST")
        if os.getenv(f"{ENV_PREFIX}PORT"):
            overrides.setdefault("server", {})["port"] = int(os.getenv(f"{ENV_PREFIX}PORT", "8000"))

        if os.getenv(f"{ENV_PREFIX}SERVER_URL"):
            overrides.setdefault("client", {})["base_url"] = os.getenv(f"{ENV_PREFIX}SERVER_URL")
        if os.getenv(f"{ENV_PREFIX}TIMEOUT"):
            overrides.setdefault("client", {})["timeout"] = float(os.getenv(f"{ENV_PREFIX}TIMEOUT", "30"))
        if os.getenv(f"{ENV_PREFIX}ROOT_PATH"):
            overrides.setdefault("client", {})["root_path"] = os.getenv(f"{ENV_PREFIX}ROOT_PATH")

        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            overrides["log_level"] = os.getenv(f"{ENV_PREFIX}LOG_LEVEL")
        if os.getenv(f"{ENV_PREFIX}LOG_FILE"):
            overrides["log_file"] = os.getenv(f"{ENV_PREFIX}LOG_FILE")

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration purely from environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_file(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = json.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        server_data = data.get("server", {})
        client_data = data.get("client", {})

        return cls(
            server=ServerConfig(**server_data) if server_data else ServerConfig(),
            client=ClientConfig(**client_data) if client_data else ClientConfig(),
            log_level=data.get("log_level", "INFO"),
            log_file=data.get("log_file"),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        new_config = copy.deepcopy(self)

        for key, value in overrides.get("server", {}).items():
            setattr(new_config.server, key, value)
        for key, value in overrides.get("client", {}).items():
            setattr(new_config.client, key, value)
        if "log_level" in overrides:
            new_config.log_level = overrides["log_level"]
        if "log_file" in overrides:
            new_config.log_file = overrides["log_file"]

        return new_config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "server": {
                "host": self.server.host,
                "port": self.server.port,
            },
            "client": {
                "base_url": self.client.base_url,
                "timeout": self.client.timeout,
                "root_path": self.client.root_path,
            },
            "log_level": self.log_level,
            "log_file": self.log_file,
        }


def default_config_paths() -> list[Path]:
    """Config file search order when no explicit path is given."""
    return [
        Path.cwd() / "blockproof.json",
        Path.cwd() / ".blockproof.json",
        Path.home() / ".config" / "blockproof" / "config.json",
    ]


def load_runtime_config(config_path: Path | None = None) -> RuntimeConfig:
    """
    Load RuntimeConfig from a config file, then overlay environment variables.

    An explicit path must exist. Without one, the default locations are
    searched and the first readable file wins. Environment variables
    ALWAYS override config file values.

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
    """
    config: RuntimeConfig | None = None

    if config_path is not None:
        config = RuntimeConfig.from_file(config_path)
    else:
        for path in default_config_paths():
            if path.exists():
                try:
                    config = RuntimeConfig.from_file(path)
                    logger.info(f"Loaded config from {path}")
                    break
                except (OSError, ValueError, TypeError) as e:
                    logger.warning(f"Failed to parse {path}: {e}")

    if config is None:
        config = RuntimeConfig()

    return config.with_env_overrides()


def get_default_config_template() -> str:
    """Get a template configuration file."""
    return json.dumps(RuntimeConfig().to_dict(), indent=2) + "\n"


# Global default configuration
_default_config: Optional[RuntimeConfig] = None


def get_default_config() -> RuntimeConfig:
    """Get the process-wide runtime configuration, loading it on first use."""
    global _default_config
    if _default_config is None:
        _default_config = load_runtime_config()
    return _default_config


def set_default_config(config: Optional[RuntimeConfig]) -> None:
    """Set (or reset with None) the process-wide runtime configuration."""
    global _default_config
    _default_config = config
