"""
Tests for the command line entry point

Run with: pytest pumpcurve/tests/test_main.py -v
"""

import pytest

from pumpcurve.main import main


@pytest.fixture
def account_files(tmp_path, decoder, global_params, curve):
    """Hex dumps of the Global and BondingCurve accounts"""
    global_file = tmp_path / "global.hex"
    curve_file = tmp_path / "curve.hex"
    global_file.write_text(decoder.encode(global_params).hex())
    curve_file.write_text(decoder.encode(curve).hex())
    return str(global_file), str(curve_file)


class TestQuoteCommand:
    """Test quote subcommand"""

    def test_buy_quote(self, account_files, capsys):
        """Should print tokens out and max cost"""
        global_file, curve_file = account_files

        code = main(["--encoding", "hex", "quote", "--global", global_file, "--curve", curve_file, "--buy-sol", "1000000000"])

        out = capsys.readouterr().out
        assert code == 0
        assert "34612903225806" in out
        assert "1050000000" in out

    def test_initial_buy_quote(self, account_files, capsys):
        """Should quote from Global when no curve is given"""
        global_file, _ = account_files

        code = main(["--encoding", "hex", "quote", "--global", global_file, "--buy-sol", "1000000000"])

        assert code == 0
        assert "34612903225806" in capsys.readouterr().out

    def test_sell_quote(self, account_files, capsys):
        """Should print net SOL out and the minimum"""
        global_file, curve_file = account_files

        code = main(["--encoding", "hex", "quote", "--global", global_file, "--curve", curve_file, "--sell-tokens", "1000000000"])

        out = capsys.readouterr().out
        assert code == 0
        assert "27679" in out
        assert "26296" in out

    def test_sell_without_curve(self, account_files):
        """Should fail cleanly when the curve is missing"""
        global_file, _ = account_files

        assert main(["--encoding", "hex", "quote", "--global", global_file, "--sell-tokens", "1"]) == 1


class TestInspectCommand:
    """Test inspect subcommand"""

    def test_inspect_curve(self, account_files, capsys):
        """Should print decoded fields and market cap"""
        _, curve_file = account_files

        code = main(["--encoding", "hex", "inspect", curve_file])

        out = capsys.readouterr().out
        assert code == 0
        assert "CurveState" in out
        assert "27958993476" in out

    def test_inspect_truncated(self, tmp_path):
        """Should fail on a short buffer"""
        path = tmp_path / "short.bin"
        path.write_bytes(b"\x00" * 10)

        assert main(["inspect", str(path)]) == 1

    def test_missing_file(self, tmp_path):
        """Should fail on a missing account file"""
        assert main(["inspect", str(tmp_path / "nope.bin")]) == 1

    def test_inspect_prints_configured_program(self, account_files, tmp_path, capsys):
        """Should report the program id from the config file"""
        _, curve_file = account_files
        config_file = tmp_path / "config.yaml"
        config_file.write_text('pumpfun:\n  program_id: "CebN5WGQ4jvEPvsVU4EoHEpgzq1VV7AbicfhtW4xC9iM"\n')

        code = main(["--config", str(config_file), "--encoding", "hex", "inspect", curve_file])

        assert code == 0
        assert "program: CebN5WGQ4jvEPvsVU4EoHEpgzq1VV7AbicfhtW4xC9iM" in capsys.readouterr().out

    def test_bad_config(self, account_files, tmp_path):
        """Should exit with 2 on an invalid config"""
        _, curve_file = account_files
        config_file = tmp_path / "config.yaml"
        config_file.write_text('pumpfun:\n  program_id: "nope"\n')

        assert main(["--config", str(config_file), "--encoding", "hex", "inspect", curve_file]) == 2
