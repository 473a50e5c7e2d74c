"""Tests for the command-line interface."""

import json

import pytest
import yaml
from click.testing import CliRunner

from ssh_uptime_monitor.cli import main
from ssh_uptime_monitor.probes.ssh import SSHProber


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "sshmon.yaml"
    path.write_text(yaml.safe_dump({
        "targets": {
            "web": {"host": "10.0.0.1", "username": "admin", "password": "pw"},
            "db": {"host": "10.0.0.2", "username": "admin", "password": "pw"},
        },
        "storage": {"path": str(tmp_path / "state")},
        "log_level": "WARNING",
    }))
    return str(path)


@pytest.fixture
def reachable(monkeypatch):
    down: set[str] = set()

    def fake_check(self, target, credentials, timeout):
        if target.id in down:
            raise ConnectionRefusedError("Connection refused")
        return True

    monkeypatch.setattr(SSHProber, "check_connection", fake_check)
    return down


@pytest.fixture
def runner():
    return CliRunner()


class TestMonitoringCommands:
    def test_monitor_then_run(self, runner, config_path, reachable):
        result = runner.invoke(main, ["monitor", "web", "-c", config_path, "--interval", "5"])
        assert result.exit_code == 0, result.output

        result = runner.invoke(main, ["run", "-c", config_path, "--json"])
        assert result.exit_code == 0, result.output
        [status] = json.loads(result.output)
        assert status["target_id"] == "web"
        assert status["status"] == "online"
        assert status["uptime_percentage"] == 100

    def test_run_exit_code_when_down(self, runner, config_path, reachable):
        reachable.add("db")
        runner.invoke(main, ["monitor", "db", "-c", config_path])

        result = runner.invoke(main, ["run", "-c", config_path, "--json"])

        assert result.exit_code == 1
        [status] = json.loads(result.output)
        assert status["status"] == "offline"
        assert status["consecutive_failures"] == 1

    def test_disable_and_enable(self, runner, config_path, reachable):
        runner.invoke(main, ["monitor", "web", "-c", config_path])
        runner.invoke(main, ["disable", "web", "-c", config_path])

        result = runner.invoke(main, ["run", "-c", config_path, "--json"])
        assert json.loads(result.output) == []

        runner.invoke(main, ["enable", "web", "-c", config_path])
        result = runner.invoke(main, ["run", "-c", config_path, "--json"])
        assert len(json.loads(result.output)) == 1

    def test_unmonitor(self, runner, config_path, reachable):
        runner.invoke(main, ["monitor", "web", "-c", config_path])
        runner.invoke(main, ["run", "-c", config_path])

        result = runner.invoke(main, ["unmonitor", "web", "-c", config_path, "--purge"])
        assert result.exit_code == 0

        result = runner.invoke(main, ["status", "-c", config_path, "--json"])
        assert json.loads(result.output) == []
        result = runner.invoke(main, ["history", "web", "-c", config_path, "--json"])
        assert json.loads(result.output) == []


class TestQueryCommands:
    def test_status_before_first_pass(self, runner, config_path, reachable):
        runner.invoke(main, ["monitor", "web", "-c", config_path])

        result = runner.invoke(main, ["status", "-c", config_path, "--json"])

        [status] = json.loads(result.output)
        assert status["status"] == "unknown"

    def test_history(self, runner, config_path, reachable):
        runner.invoke(main, ["monitor", "web", "-c", config_path])
        for _ in range(3):
            runner.invoke(main, ["run", "-c", config_path])

        result = runner.invoke(main, ["history", "web", "-c", config_path, "-n", "2", "--json"])

        records = json.loads(result.output)
        assert len(records) == 2
        assert all(r["outcome"] == "success" for r in records)

    def test_history_table(self, runner, config_path, reachable):
        runner.invoke(main, ["check", "web", "-c", config_path])
        result = runner.invoke(main, ["history", "web", "-c", config_path])
        assert result.exit_code == 0
        assert "success" in result.output

    def test_check(self, runner, config_path, reachable):
        result = runner.invoke(main, ["check", "web", "-c", config_path, "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)[0]["status"] == "online"

    def test_check_unknown_target(self, runner, config_path, reachable):
        result = runner.invoke(main, ["check", "ghost", "-c", config_path])
        assert result.exit_code == 1
        assert "ghost" in result.output


class TestInit:
    def test_creates_config(self, runner, tmp_path):
        path = tmp_path / "sshmon.yaml"
        result = runner.invoke(main, ["init", "-o", str(path)])
        assert result.exit_code == 0
        assert "targets" in yaml.safe_load(path.read_text())

    def test_refuses_to_overwrite(self, runner, tmp_path):
        path = tmp_path / "sshmon.yaml"
        path.write_text("keep: me\n")
        result = runner.invoke(main, ["init", "-o", str(path)])
        assert result.exit_code == 1
        assert path.read_text() == "keep: me\n"

    def test_missing_config(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        result = runner.invoke(main, ["status"])
        assert result.exit_code == 1
        assert "No configuration file found" in result.output
