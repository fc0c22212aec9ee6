"""Configuration management for endpoints, mints and batching.

Values come from, in increasing priority: built-in defaults, an optional
YAML file, environment variables (``SONIC_RING_*``, ``.env`` supported) and
explicit overrides passed by the CLI.
"""

import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from .exceptions import ConfigurationError

ENV_PREFIX = "SONIC_RING_"


@dataclass(frozen=True)
class Settings:
    """Endpoints, token mints and run parameters."""

    # Sonic RPC endpoints
    devnet_rpc_url: str = "https://devnet.sonic.game"
    testnet_rpc_url: str = "https://api.testnet.v0.sonic.game"

    # RING mints on each network
    devnet_mint: str = "8DihuwAUQ9CAU8U2pQ5Rv7FzpsGaZmbwK9Ln6fStdSeo"
    testnet_mint: str = "EaVyvc1xw2wsZV3en6HaSx5B3ebuANXfrFekzX7zZzVm"

    # Token list chain ids
    devnet_chain_id: int = 103
    testnet_chain_id: int = 102

    token_info_url: str = "https://token-list-api.solana.cloud/v1/mints"
    airdrop_url: str = "https://airdrop.sonic.game/api/allocations"

    batch_size: int = 5
    batch_delay: float = 1.0  # seconds between batches
    request_timeout: float = 15.0  # seconds, per HTTP/RPC call

    report_prefix: str = "balance"
    output_dir: Path = Path(".")

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ConfigurationError("batch_size", f"must be >= 1, got {self.batch_size}")
        if self.batch_delay < 0:
            raise ConfigurationError("batch_delay", f"must be >= 0, got {self.batch_delay}")
        if self.request_timeout <= 0:
            raise ConfigurationError(
                "request_timeout", f"must be > 0, got {self.request_timeout}"
            )
        if not self.report_prefix:
            raise ConfigurationError("report_prefix", "must not be empty")

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_mapping(cls, values: dict[str, Any], base: Optional["Settings"] = None) -> "Settings":
        """
        Build settings from a mapping of field names to raw values.

        Args:
            values: Field name -> value. Strings are coerced to the field type.
            base: Settings to start from (defaults if not provided)

        Returns:
            New Settings instance

        Raises:
            ConfigurationError: On unknown keys or values of the wrong type
        """
        base = base or cls()
        known = {f.name: f for f in fields(cls)}
        updates: dict[str, Any] = {}

        for key, raw in values.items():
            if key not in known:
                raise ConfigurationError(key, "unknown setting")
            if raw is None:
                continue
            updates[key] = _coerce(key, raw, type(getattr(base, key)))

        return replace(base, **updates)

    @classmethod
    def from_yaml(cls, path: Path, base: Optional["Settings"] = None) -> "Settings":
        """Load settings from a flat YAML mapping."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigurationError(str(path), f"cannot read config file: {e}")
        except yaml.YAMLError as e:
            raise ConfigurationError(str(path), f"invalid YAML: {e}")

        if not isinstance(data, dict):
            raise ConfigurationError(str(path), "config file must contain a mapping")

        return cls.from_mapping(data, base=base)

    @classmethod
    def from_env(cls, base: Optional["Settings"] = None) -> "Settings":
        """Apply ``SONIC_RING_<FIELD>`` environment variables."""
        values = {}
        for name in cls.field_names():
            env_value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if env_value is not None:
                values[name] = env_value
        return cls.from_mapping(values, base=base)

    @classmethod
    def load(
        cls,
        config_file: Path | None = None,
        env_file: Path | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> "Settings":
        """
        Load settings from all sources.

        Args:
            config_file: Optional YAML file
            env_file: Optional .env file. If not provided, looks for .env
                      in the current directory.
            overrides: Explicit values that win over everything else

        Returns:
            Settings instance with loaded values
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv(Path.cwd() / ".env")

        settings = cls()
        if config_file:
            settings = cls.from_yaml(config_file, base=settings)
        settings = cls.from_env(base=settings)
        if overrides:
            settings = cls.from_mapping(overrides, base=settings)
        return settings

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["output_dir"] = str(self.output_dir)
        return data


def _coerce(key: str, raw: Any, target: type) -> Any:
    """Convert a raw config value to the type of the default."""
    if isinstance(raw, target) and not (target is int and isinstance(raw, bool)):
        return raw
    try:
        if target is int:
            if isinstance(raw, float) and not raw.is_integer():
                raise ValueError(f"{raw} is not an integer")
            return int(raw)
        if target is float:
            return float(raw)
        if issubclass(target, Path):
            return Path(str(raw))
        if target is str:
            return str(raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(key, f"invalid value {raw!r}: {e}")
    raise ConfigurationError(key, f"unsupported value {raw!r}")

