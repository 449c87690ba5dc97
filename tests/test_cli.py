"""
Tests for the CLI entrypoint — global options and exit codes.
"""

import logging
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from passwall_installer.core.errors import ConfigurationError, PackageNotFoundError
from passwall_installer.main import cli

RUN = "passwall_installer.core.services.installer.run"


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Passwall Installer" in result.output

    def test_short_help(self):
        result = CliRunner().invoke(cli, ["-h"])
        assert result.exit_code == 0
        assert "--config" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestRunCommand:
    """Exit codes of a full run, with the installer itself patched out."""

    def _invoke(self, args=(), **run_kwargs):
        runner = CliRunner()
        with runner.isolated_filesystem(), patch(RUN, **run_kwargs) as run:
            result = runner.invoke(cli, list(args))
        return result, run

    def test_success(self):
        result, run = self._invoke()
        assert result.exit_code == 0
        assert run.call_args.args[0].config.buffer_bytes == 204800

    def test_verbose_sets_debug_level(self):
        result, _ = self._invoke(["-v"])
        assert result.exit_code == 0
        assert logging.getLogger().level == logging.DEBUG

    def test_quiet_sets_warning_level(self):
        result, _ = self._invoke(["-q"])
        assert result.exit_code == 0
        assert logging.getLogger().level == logging.WARNING

    def test_config_file(self, tmp_path: Path):
        config = tmp_path / "router.yml"
        config.write_text("buffer_bytes: 1024\n")
        result, run = self._invoke(["--config", str(config)])
        assert result.exit_code == 0
        assert run.call_args.args[0].config.buffer_bytes == 1024

    def test_installer_error_exits_1(self):
        result, _ = self._invoke(side_effect=PackageNotFoundError("xray-core"))
        assert result.exit_code == 1

    def test_bad_config_exits_1(self, tmp_path: Path):
        result, run = self._invoke(["--config", str(tmp_path / "missing.yml")])
        assert result.exit_code == 1
        run.assert_not_called()

    def test_config_error_from_run_exits_1(self):
        result, _ = self._invoke(side_effect=ConfigurationError("bad default"))
        assert result.exit_code == 1

    def test_ctrl_c_exits_130(self):
        result, _ = self._invoke(side_effect=KeyboardInterrupt)
        assert result.exit_code == 130

    def test_sigterm_exit_code_passes_through(self):
        result, _ = self._invoke(side_effect=SystemExit(143))
        assert result.exit_code == 143
