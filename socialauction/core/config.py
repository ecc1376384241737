"""
Configuration parameters for Social Auction.

Defines auction defaults, ascending-variant rules and logging options.
Values come from the dataclass defaults, optionally overridden by a JSON
file and then by SOCIALAUCTION_* environment variables (a .env file is
honoured).
"""

import json
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from dotenv import dotenv_values, find_dotenv

ENV_PREFIX = "SOCIALAUCTION_"


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off", ""):
        return False
    raise ValueError(f"Not a boolean: {value!r}")


@dataclass
class AuctionHouseConfig:
    """Auction-wide configuration parameters"""

    # Batch auction defaults
    default_duration: int = 60 * 60  # Seconds between creation and deadline
    default_supply: int = 10  # Units minted for a new auction
    unit_name: str = "AuctionCoin"
    unit_symbol: str = "AC"

    # Ascending single-winner variant
    min_price: int = 1  # Reserve price for the first bid
    min_bid_increment: int = 1  # Amount each new bid must add over the leader

    # Logging
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    log_to_file: bool = False

    def __post_init__(self):
        """Normalize and validate values"""
        self.log_dir = Path(self.log_dir)
        self.log_level = self.log_level.upper()

        if self.default_duration <= 0:
            raise ValueError(f"default_duration must be positive, got {self.default_duration}")
        if self.default_supply <= 0:
            raise ValueError(f"default_supply must be positive, got {self.default_supply}")
        if self.min_price < 0:
            raise ValueError(f"min_price cannot be negative, got {self.min_price}")
        if self.min_bid_increment < 0:
            raise ValueError(f"min_bid_increment cannot be negative, got {self.min_bid_increment}")
        if not self.unit_name or not self.unit_symbol:
            raise ValueError("unit_name and unit_symbol must be non-empty")
        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log_level: {self.log_level}")


# Converters for values read from JSON or the environment
_COERCE: Dict[str, Callable[[Any], Any]] = {
    "default_duration": int,
    "default_supply": int,
    "unit_name": str,
    "unit_symbol": str,
    "min_price": int,
    "min_bid_increment": int,
    "log_level": str,
    "log_dir": Path,
    "log_to_file": _parse_bool,
}


# Global config instance (can be overridden)
config = AuctionHouseConfig()


def _overrides_from_env(env: Dict[str, Optional[str]]) -> Dict[str, Any]:
    overrides = {}
    for f in fields(AuctionHouseConfig):
        key = ENV_PREFIX + f.name.upper()
        value = env.get(key)
        if value is not None:
            overrides[f.name] = _COERCE[f.name](value)
    return overrides


def load_config(
    config_path: Optional[str] = None,
    env_file: Optional[str] = None,
) -> AuctionHouseConfig:
    """
    Load configuration from file and environment, falling back to defaults.

    Precedence (highest first): process environment, .env file, JSON file,
    dataclass defaults.

    Args:
        config_path: Optional path to a JSON config file
        env_file: Optional path to a .env file. If None, a .env in the
            working directory (or a parent) is used when present.

    Returns:
        AuctionHouseConfig instance
    """
    cfg = AuctionHouseConfig()

    if config_path:
        data = json.loads(Path(config_path).read_text())
        if not isinstance(data, dict):
            raise ValueError(f"Config file {config_path} must contain a JSON object")
        unknown = set(data) - set(_COERCE)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        cfg = replace(cfg, **{k: _COERCE[k](v) for k, v in data.items()})

    dotenv_path = env_file or find_dotenv(usecwd=True)
    env: Dict[str, Optional[str]] = dict(dotenv_values(dotenv_path)) if dotenv_path else {}
    env.update({k: v for k, v in os.environ.items() if k.startswith(ENV_PREFIX)})

    overrides = _overrides_from_env(env)
    if overrides:
        cfg = replace(cfg, **overrides)

    return cfg
