"""
Tests for the idnakit command line.
"""

from click.testing import CliRunner
import pytest

from idnakit import __version__
from idnakit.cli import main


@pytest.fixture
def runner():
    return CliRunner()


class TestConvert:
    """to-ascii / to-unicode commands."""

    def test_to_ascii(self, runner):
        result = runner.invoke(main, ["to-ascii", "Bücher.example"])
        assert result.exit_code == 0
        assert "xn--bcher-kva.example" in result.output

    def test_to_unicode(self, runner):
        result = runner.invoke(main, ["to-unicode", "xn--bcher-kva.example"])
        assert result.exit_code == 0
        assert "bücher.example" in result.output

    def test_output_file(self, runner, tmp_path):
        output = tmp_path / "out.tsv"
        result = runner.invoke(main, ["to-ascii", "faß.de", "example.com", "-o", str(output)])
        assert result.exit_code == 0
        assert output.read_text(encoding="utf-8") == "faß.de\txn--fa-hia.de\nexample.com\texample.com\n"

    def test_transitional(self, runner, tmp_path):
        output = tmp_path / "out.tsv"
        result = runner.invoke(main, ["to-ascii", "--transitional", "faß.de", "-o", str(output)])
        assert result.exit_code == 0
        assert output.read_text(encoding="utf-8") == "faß.de\tfass.de\n"

    def test_failure_exit_code(self, runner):
        result = runner.invoke(main, ["to-ascii", "--", "-abc.com"])
        assert result.exit_code == 1
        assert "V3" in result.output

    def test_std3_flag(self, runner):
        assert runner.invoke(main, ["to-ascii", "a_b.com"]).exit_code == 0
        assert runner.invoke(main, ["to-ascii", "--std3", "a_b.com"]).exit_code == 1

    def test_config_file(self, runner, tmp_path):
        config = tmp_path / "idna.yaml"
        config.write_text("idna:\n  check_hyphens: false\n")
        result = runner.invoke(main, ["to-ascii", "-c", str(config), "ab--cd.com"])
        assert result.exit_code == 0

    def test_bad_config_file(self, runner, tmp_path):
        config = tmp_path / "idna.yaml"
        config.write_text("check_hyphens: sometimes\n")
        result = runner.invoke(main, ["to-ascii", "-c", str(config), "example.com"])
        assert result.exit_code == 2

    def test_requires_domain(self, runner):
        assert runner.invoke(main, ["to-ascii"]).exit_code == 2


class TestClassify:
    """classify command."""

    def test_deviation(self, runner):
        result = runner.invoke(main, ["classify", "U+00DF"])
        assert result.exit_code == 0
        assert "deviation" in result.output
        assert "U+0073 U+0073" in result.output

    def test_comma_separated(self, runner):
        result = runner.invoke(main, ["classify", "A,0x19DA"])
        assert result.exit_code == 0
        assert "mapped" in result.output
        assert "XV8" in result.output

    def test_invalid(self, runner):
        result = runner.invoke(main, ["classify", "U+ZZZZ"])
        assert result.exit_code == 2


class TestMisc:
    """profiles and --version."""

    def test_profiles(self, runner):
        result = runner.invoke(main, ["profiles"])
        assert result.exit_code == 0
        for name in ("default", "strict", "lax", "conformance", "transitional"):
            assert name in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output
