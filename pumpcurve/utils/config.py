"""
Engine Configuration

Loaded from YAML (see config/config.example.yaml) and passed explicitly to
whatever needs it; there is no process-wide default instance.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

import yaml
from solders.pubkey import Pubkey

from pumpcurve.core.errors import ConfigError
from pumpcurve.core.layouts import DEFAULT_DISCRIMINATORS, DISCRIMINATOR_SIZE, AccountKind
from pumpcurve.core.intmath import BPS_DENOMINATOR

PUMPFUN_PROGRAM_ID = "6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P"


@dataclass
class EngineConfig:
    """Settings for decoding and quoting"""

    program_id: str = PUMPFUN_PROGRAM_ID
    global_discriminator: str = DEFAULT_DISCRIMINATORS[AccountKind.GLOBAL].hex()
    bonding_curve_discriminator: str = DEFAULT_DISCRIMINATORS[AccountKind.BONDING_CURVE].hex()
    default_slippage_bps: int = 500  # 5%
    logging: Dict = field(default_factory=dict)

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ConfigError on out-of-range values"""
        try:
            Pubkey.from_string(self.program_id)
        except (TypeError, ValueError):
            raise ConfigError(f"program_id must be a base58 public key, got {self.program_id!r}")

        if isinstance(self.default_slippage_bps, bool) or not isinstance(self.default_slippage_bps, int):
            raise ConfigError("default_slippage_bps must be an integer")
        if not 0 <= self.default_slippage_bps <= BPS_DENOMINATOR:
            raise ConfigError(
                f"default_slippage_bps must be between 0 and {BPS_DENOMINATOR}, got {self.default_slippage_bps}"
            )

        for name in ("global_discriminator", "bonding_curve_discriminator"):
            value = getattr(self, name)
            try:
                tag = bytes.fromhex(value)
            except (TypeError, ValueError):
                raise ConfigError(f"{name} must be a hex string, got {value!r}")
            if len(tag) != DISCRIMINATOR_SIZE:
                raise ConfigError(f"{name} must be {DISCRIMINATOR_SIZE} bytes, got {len(tag)}")

    def discriminators(self) -> Dict[AccountKind, bytes]:
        return {
            AccountKind.GLOBAL: bytes.fromhex(self.global_discriminator),
            AccountKind.BONDING_CURVE: bytes.fromhex(self.bonding_curve_discriminator),
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "EngineConfig":
        """
        Build config from a parsed YAML document

        Expected structure:
            pumpfun:
              program_id: ...
              discriminators:
                global: a7e8e8b1c86c727f
                bonding_curve: 17b7f83760d8ac60
            quoting:
              default_slippage_bps: 500
            logging: {...}
        """
        data = data or {}
        pumpfun = data.get("pumpfun", {}) or {}
        discriminators = pumpfun.get("discriminators", {}) or {}
        quoting = data.get("quoting", {}) or {}

        defaults = cls.__dataclass_fields__
        return cls(
            program_id=pumpfun.get("program_id", PUMPFUN_PROGRAM_ID),
            global_discriminator=discriminators.get(
                "global", defaults["global_discriminator"].default
            ),
            bonding_curve_discriminator=discriminators.get(
                "bonding_curve", defaults["bonding_curve_discriminator"].default
            ),
            default_slippage_bps=quoting.get(
                "default_slippage_bps", defaults["default_slippage_bps"].default
            ),
            logging=data.get("logging", {}) or {},
        )


def load_config(config_path: str = "config/config.yaml") -> EngineConfig:
    """Load configuration from YAML"""
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(
            f"Config not found: {path}. "
            f"Copy config.example.yaml to config.yaml and configure it."
        )

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    return EngineConfig.from_dict(data)
