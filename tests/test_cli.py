import logging

import pytest
from click.testing import CliRunner

from mcdevkit import cli
from mcdevkit.models import SoftwareApiResponse
from mcdevkit.servers.base import BaseServer
from mcdevkit.utils.api import PaperAPI


@pytest.fixture(autouse=True)
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def fake_launch(monkeypatch):
    """Skip the network and the Java process, record what would be started."""
    started = []

    async def version_exists(version):
        return True

    async def fake_download(self, progress_callback=None):
        self.server_jar_path.write_bytes(b"jar")
        return self.server_jar_path

    async def fake_start(self, interrupt=None):
        started.append(self.build_command("java"))
        return 0

    monkeypatch.setattr(cli, "check_valid_version", version_exists)
    monkeypatch.setattr(BaseServer, "download_server_jar", fake_download)
    monkeypatch.setattr(BaseServer, "start", fake_start)
    return started


def test_no_command_prints_usage(runner):
    result = runner.invoke(cli.main, [])

    assert result.exit_code == 0
    assert "Usage" in result.output


def test_malformed_version_exits_with_error(runner, tmp_path):
    result = runner.invoke(cli.main, ["start", "paper", "2.0", "-w", str(tmp_path / "server")])

    assert result.exit_code == 1
    assert not (tmp_path / "server").exists()


def test_unknown_software_is_rejected(runner):
    result = runner.invoke(cli.main, ["start", "bukkit", "1.20.1"])

    assert result.exit_code == 2


@pytest.mark.parametrize("option", [["--port", "0"], ["--port", "70000"], ["--mem", "0"]])
def test_out_of_range_options_exit_with_error(runner, option):
    result = runner.invoke(cli.main, ["start", "paper", "1.20.1", *option])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_start_prepares_workspace_and_launches(runner, tmp_path, fake_launch):
    plugin = tmp_path / "plugin.jar"
    plugin.write_bytes(b"plugin")
    target = tmp_path / "server"

    result = runner.invoke(cli.main, [
        "start", "paper", "1.20.1", str(plugin),
        "-w", str(target), "-m", "1024", "-p", "25570", "--args=--forceUpgrade",
    ])

    assert result.exit_code == 0, result.output
    assert (target / "server.jar").is_file()
    assert (target / "eula.txt").read_text() == "eula=true"
    assert (target / "plugins" / "plugin.jar").is_file()
    assert fake_launch == [[
        "java", "-Xms256M", "-Xmx1024M", "-jar", "server.jar",
        "--forceUpgrade", "--nogui", "--port=25570",
    ]]
    assert "Server stopped" in result.output


def test_start_debug_prints_configuration(runner, tmp_path, fake_launch):
    result = runner.invoke(cli.main, ["start", "paper", "1.20.1", "-w", str(tmp_path / "server"), "-d"])

    assert result.exit_code == 0, result.output
    assert "Server Configuration" in result.output


def test_unknown_version_exits_before_creating_workspace(runner, tmp_path, monkeypatch):
    async def version_missing(version):
        return False

    monkeypatch.setattr(cli, "check_valid_version", version_missing)
    target = tmp_path / "server"

    result = runner.invoke(cli.main, ["start", "paper", "1.20.1", "-w", str(target)])

    assert result.exit_code == 1
    assert not target.exists()


def test_versions_lists_newest_first(runner, monkeypatch):
    response = SoftwareApiResponse(
        latest="1.20.1",
        versions={"1.8.8": "https://jars.test/a.jar", "1.20.1": "https://jars.test/b.jar"},
    )
    monkeypatch.setattr(PaperAPI, "fetch_versions", lambda self: response)

    result = runner.invoke(cli.main, ["versions"])

    assert result.exit_code == 0, result.output
    assert "1.20.1 (latest)" in result.output
    assert result.output.index("1.20.1") < result.output.index("1.8.8")


def test_config_shows_file_location(runner):
    result = runner.invoke(cli.main, ["config"])

    assert result.exit_code == 0
    assert "Configuration file" in result.output
