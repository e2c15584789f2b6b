"""Configuration for data sources and the aggregation engine.

API credentials come from environment variables or a .env file.
Engine settings (thresholds, chains, denylist) are an explicit value
object loaded from YAML and passed to the components that need it.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .addresses import normalize_address
from .exceptions import ConfigurationError
from .types import TokenAmount

DEFAULT_DUNE_BASE_URL = "https://api.dune.com/api/v1"
DEFAULT_DUNE_QUERY_ID = "5949529"

DEFAULT_RETAIL_THRESHOLD: TokenAmount = 0
DEFAULT_MEGA_HOLDER_THRESHOLD: TokenAmount = 20_000_000_000
DEFAULT_TOTAL_SUPPLY: TokenAmount = 92_577_234_366


@dataclass
class APIConfig:
    """API configuration for the holder data source."""

    # Dune Analytics (holder balances query)
    dune_api_key: Optional[str] = None
    dune_query_id: str = DEFAULT_DUNE_QUERY_ID
    dune_base_url: str = DEFAULT_DUNE_BASE_URL

    @classmethod
    def from_env(cls) -> "APIConfig":
        """Load configuration from environment variables."""
        return cls(
            dune_api_key=os.getenv("DUNE_API_KEY"),
            dune_query_id=os.getenv("DUNE_QUERY_ID") or DEFAULT_DUNE_QUERY_ID,
            dune_base_url=os.getenv("DUNE_BASE_URL") or DEFAULT_DUNE_BASE_URL,
        )

    @classmethod
    def load(cls, env_file: Optional[Path] = None) -> "APIConfig":
        """
        Load configuration from .env file and environment variables.

        Args:
            env_file: Optional path to .env file. If not provided,
                      the nearest .env above the working directory is used.

        Returns:
            APIConfig instance with loaded values
        """
        load_dotenv(env_file or find_dotenv(usecwd=True))
        return cls.from_env()

    def has_dune(self) -> bool:
        """Check if Dune API key is configured."""
        return bool(self.dune_api_key)

    def require_dune_key(self) -> str:
        """Return the Dune API key or fail loudly."""
        if not self.dune_api_key:
            raise ConfigurationError("DUNE_API_KEY", "Missing DUNE_API_KEY environment variable")
        return self.dune_api_key


class EngineConfig(BaseModel):
    """Immutable settings for one aggregation run."""

    retail_threshold: TokenAmount = DEFAULT_RETAIL_THRESHOLD
    mega_holder_threshold: TokenAmount = DEFAULT_MEGA_HOLDER_THRESHOLD
    total_supply: TokenAmount = DEFAULT_TOTAL_SUPPLY
    denylist: frozenset[str] = Field(default_factory=frozenset)
    chains: dict[str, str] = Field(default_factory=dict)  # key -> label, in report order
    balance_fields: tuple[str, ...] = ("telcoin_balance", "amount")
    chain_fields: tuple[str, ...] = ("blockchain", "chain")

    model_config = {"frozen": True}

    @field_validator("denylist", mode="before")
    @classmethod
    def normalize_denylist(cls, v: Any) -> frozenset[str]:
        addresses = (normalize_address(a) for a in (v or ()))
        return frozenset(a for a in addresses if a)

    @field_validator("chains", mode="before")
    @classmethod
    def normalize_chains(cls, v: Any) -> dict[str, str]:
        # Accept {key: "Label"} or {key: {"label": "Label"}}
        chains: dict[str, str] = {}
        for key, entry in (v or {}).items():
            if isinstance(entry, dict):
                label = entry.get("label") or key
            else:
                label = entry or key
            chains[str(key).lower()] = str(label)
        return chains

    @model_validator(mode="after")
    def check_thresholds(self) -> "EngineConfig":
        if self.retail_threshold < 0 or self.mega_holder_threshold < 0:
            raise ValueError("thresholds must be non-negative")
        if self.retail_threshold > self.mega_holder_threshold:
            raise ValueError(
                f"retail threshold {self.retail_threshold} exceeds "
                f"mega-holder threshold {self.mega_holder_threshold}"
            )
        return self

    @property
    def chain_order(self) -> list[str]:
        return list(self.chains)

    def label_for(self, chain_key: str) -> str:
        """Configured display label for a chain, falling back to its key."""
        return self.chains.get(chain_key, chain_key)

    def is_denylisted(self, address: str) -> bool:
        return address in self.denylist

    @classmethod
    def from_yaml(cls, path: Path | str) -> "EngineConfig":
        """
        Load engine settings from a YAML file.

        Expected layout::

            total_supply: 92577234366
            thresholds:
              retail: 0
              mega_holder: 20000000000
            chains:
              ethereum: {label: Ethereum}
              polygon: Polygon
            exclusions: ["0xabc..."]        # and/or
            exclusions_file: exclusions.json

        Relative ``exclusions_file`` paths resolve against the config file.
        """
        path = Path(path)
        data = _read_yaml(path, "config")
        if not isinstance(data, dict):
            raise ConfigurationError("config", f"{path} must contain a mapping")

        thresholds = data.get("thresholds") or {}
        exclusions = list(data.get("exclusions") or [])

        exclusions_file = data.get("exclusions_file")
        if exclusions_file:
            exclusions_path = Path(exclusions_file)
            if not exclusions_path.is_absolute():
                exclusions_path = path.parent / exclusions_path
            extra = _read_yaml(exclusions_path, "exclusions_file")
            if not isinstance(extra, list):
                raise ConfigurationError(
                    "exclusions_file", f"{exclusions_path} must contain a list of addresses"
                )
            exclusions.extend(extra)

        values: dict[str, Any] = {
            "denylist": exclusions,
            "chains": data.get("chains") or {},
        }
        if "retail" in thresholds:
            values["retail_threshold"] = thresholds["retail"]
        if "mega_holder" in thresholds:
            values["mega_holder_threshold"] = thresholds["mega_holder"]
        if "total_supply" in data:
            values["total_supply"] = data["total_supply"]
        if data.get("balance_fields"):
            values["balance_fields"] = tuple(data["balance_fields"])
        if data.get("chain_fields"):
            values["chain_fields"] = tuple(data["chain_fields"])

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError("config", str(e)) from e

    def with_overrides(self, **updates: Any) -> "EngineConfig":
        """Return a new config with the given (non-None) fields replaced."""
        values = self.model_dump()
        values.update({k: v for k, v in updates.items() if v is not None})
        try:
            return EngineConfig(**values)
        except ValidationError as e:
            raise ConfigurationError("overrides", str(e)) from e


def _read_yaml(path: Path, config_key: str) -> Any:
    """Parse a YAML (or JSON) file, mapping I/O and syntax errors to ConfigurationError."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(config_key, f"File not found: {path}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(config_key, f"Invalid YAML in {path}: {e}") from e
