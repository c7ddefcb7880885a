"""
Tests for configuration loading

Run with: pytest pumpcurve/tests/test_config.py -v
"""

import pytest

from pumpcurve.core.errors import ConfigError
from pumpcurve.core.layouts import AccountKind
from pumpcurve.utils.config import EngineConfig, load_config


class TestEngineConfig:
    """Test config defaults and validation"""

    def test_defaults(self):
        """Should default to 5% slippage and Anchor tags"""
        config = EngineConfig()

        assert config.default_slippage_bps == 500
        assert config.discriminators()[AccountKind.GLOBAL].hex() == "a7e8e8b1c86c727f"

    def test_from_empty_dict(self):
        """Should tolerate a missing document"""
        assert EngineConfig.from_dict(None) == EngineConfig()

    def test_from_dict(self):
        """Should read nested sections"""
        config = EngineConfig.from_dict(
            {
                "pumpfun": {"discriminators": {"bonding_curve": "0101010101010101"}},
                "quoting": {"default_slippage_bps": 250},
                "logging": {"level": "DEBUG"},
            }
        )

        assert config.default_slippage_bps == 250
        assert config.discriminators()[AccountKind.BONDING_CURVE] == b"\x01" * 8
        assert config.logging == {"level": "DEBUG"}

    @pytest.mark.parametrize("bps", [-1, 10_001])
    def test_slippage_range(self, bps):
        """Should reject slippage outside 0-10000 bps"""
        with pytest.raises(ConfigError, match="default_slippage_bps"):
            EngineConfig(default_slippage_bps=bps)

    @pytest.mark.parametrize("tag", ["zz", "0102"])
    def test_bad_discriminator(self, tag):
        """Should reject malformed or wrong-length tags"""
        with pytest.raises(ConfigError):
            EngineConfig(global_discriminator=tag)

    def test_bad_program_id(self):
        """Should reject a program id that is not a public key"""
        with pytest.raises(ConfigError, match="program_id"):
            EngineConfig(program_id="not-a-pubkey")

    def test_program_id_from_dict(self):
        """Should read the program id override"""
        program_id = "CebN5WGQ4jvEPvsVU4EoHEpgzq1VV7AbicfhtW4xC9iM"
        config = EngineConfig.from_dict({"pumpfun": {"program_id": program_id}})

        assert config.program_id == program_id


class TestLoadConfig:
    """Test YAML loading"""

    def test_missing_file(self, tmp_path):
        """Should raise FileNotFoundError"""
        with pytest.raises(FileNotFoundError, match="Config not found"):
            load_config(str(tmp_path / "config.yaml"))

    def test_load_yaml(self, tmp_path):
        """Should parse a YAML document"""
        path = tmp_path / "config.yaml"
        path.write_text("quoting:\n  default_slippage_bps: 100\n")

        assert load_config(str(path)).default_slippage_bps == 100
