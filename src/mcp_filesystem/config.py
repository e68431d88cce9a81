"""Configuration loading.

Settings live in a YAML file with three optional sections: ``server``,
``audit`` and ``client``. String values may reference environment
variables with ``${VAR}`` syntax.
"""

from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from mcp_filesystem import __version__
from mcp_filesystem.exceptions import ConfigError

DEFAULT_WORKING_DIRECTORY = "./workspace"

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}")


def expand_env_vars(value: str) -> str:
    """Expand environment variables in a string.

    Supports ${VAR_NAME} syntax. Unknown variables are left unchanged.

    Args:
        value: String potentially containing environment variable references.

    Returns:
        String with known environment variables expanded.
    """

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is not None:
            return env_value
        if var_name == "HOME":
            return os.path.expanduser("~")
        return match.group(0)

    return _ENV_PATTERN.sub(replacer, value)


@dataclass
class ServerConfig:
    """Identity the server advertises during the handshake."""

    name: str = "mcp-filesystem"
    version: str = __version__

    def server_info(self) -> dict[str, str]:
        return {"name": self.name, "version": self.version}


@dataclass
class AuditConfig:
    """Audit log settings; an empty log_file disables auditing."""

    log_file: str = ""


@dataclass
class ClientConfig:
    """How the client reaches the server and issues calls."""

    command: str = field(default_factory=lambda: sys.executable)
    args: list[str] = field(default_factory=lambda: ["-m", "mcp_filesystem"])
    call_timeout: float | None = None
    working_directory: str = DEFAULT_WORKING_DIRECTORY

    def validate(self) -> None:
        if not self.command:
            raise ConfigError("client.command must not be empty")
        if self.call_timeout is not None and self.call_timeout <= 0:
            raise ConfigError("client.call_timeout must be positive")


@dataclass
class AppConfig:
    """Complete configuration."""

    server: ServerConfig = field(default_factory=ServerConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)
    client: ClientConfig = field(default_factory=ClientConfig)

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> AppConfig:
        """Create a configuration from a parsed YAML mapping.

        Args:
            config: Dictionary parsed from YAML.

        Returns:
            AppConfig with defaults for anything not given.

        Raises:
            ConfigError: If a section or value has the wrong shape.
        """
        server = _section(config, "server")
        audit = _section(config, "audit")
        client = _section(config, "client")

        defaults = ClientConfig()
        args = client.get("args", defaults.args)
        if not isinstance(args, list):
            raise ConfigError("client.args must be a list")

        timeout = client.get("call_timeout")
        try:
            call_timeout = float(timeout) if timeout is not None else None
        except (TypeError, ValueError) as e:
            raise ConfigError(f"client.call_timeout must be a number: {timeout!r}") from e

        client_config = ClientConfig(
            command=expand_env_vars(str(client.get("command", defaults.command))),
            args=[expand_env_vars(str(arg)) for arg in args],
            call_timeout=call_timeout,
            working_directory=expand_env_vars(
                str(client.get("working_directory", defaults.working_directory))
            ),
        )
        client_config.validate()

        return cls(
            server=ServerConfig(
                name=str(server.get("name", ServerConfig.name)),
                version=str(server.get("version", ServerConfig.version)),
            ),
            audit=AuditConfig(log_file=expand_env_vars(str(audit.get("log_file") or ""))),
            client=client_config,
        )


def _section(config: dict[str, Any], name: str) -> dict[str, Any]:
    section = config.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' section must be a mapping")
    return section


def load_config(path: Path) -> AppConfig:
    """Load configuration from a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        AppConfig instance.

    Raises:
        ConfigError: If the file cannot be found, parsed, or validated.
    """
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config YAML: {e}") from e

    if config is None:
        return AppConfig()

    if not isinstance(config, dict):
        raise ConfigError("Config must be a YAML mapping")

    return AppConfig.from_dict(config)
