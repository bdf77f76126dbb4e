import subprocess
from pathlib import Path

import pytest
from rich.console import Console

import flowwinstaller.services.docker_runtime as docker_runtime_module
from flowwinstaller.errors import InstallerError
from flowwinstaller.services.docker_runtime import DockerRuntimeService

COMPOSE_FILE = Path("/opt/floww/docker-compose.yml")


class DummyLogger:
    def __init__(self):
        self.warnings = []

    def debug(self, *_args, **_kwargs):
        return None

    def info(self, *_args, **_kwargs):
        return None

    def warning(self, message, *args):
        self.warnings.append(message % args)


class RecordingRunner:
    def __init__(self, ps_output="", health_codes=None, fail_on=None, hang_on=None):
        self.ps_output = ps_output
        self.health_codes = list(health_codes or [])
        self.fail_on = fail_on
        self.hang_on = list(hang_on or [])
        self.commands = []
        self.timeouts = []

    def __call__(self, cmd, check=True, capture_output=False, timeout=None):
        self.commands.append(list(cmd))
        self.timeouts.append(timeout)
        if self.fail_on and self.fail_on in cmd and check:
            raise InstallerError(f"Command failed (1): {' '.join(cmd)}")
        if self.hang_on and self.hang_on[0] in cmd:
            self.hang_on.pop(0)
            raise InstallerError(f"Command timed out after {timeout}s: {' '.join(cmd)}")
        if "ps" in cmd:
            return subprocess.CompletedProcess(cmd, 0, stdout=self.ps_output, stderr="")
        if "exec" in cmd:
            code = self.health_codes.pop(0) if self.health_codes else 1
            return subprocess.CompletedProcess(cmd, code, stdout="", stderr="")
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")


@pytest.fixture
def sleeps(monkeypatch):
    calls = []
    monkeypatch.setattr(docker_runtime_module.time, "sleep", lambda seconds: calls.append(seconds))
    return calls


def _service(logger=None, console=None, **kwargs):
    return DockerRuntimeService(
        logger=logger or DummyLogger(),
        console=console or Console(record=True),
        **kwargs,
    )


def test_start_services_pulls_then_starts_detached():
    runner = RecordingRunner()

    _service().start_services(["docker", "compose"], COMPOSE_FILE, runner)

    assert runner.commands == [
        ["docker", "compose", "-f", str(COMPOSE_FILE), "pull"],
        ["docker", "compose", "-f", str(COMPOSE_FILE), "up", "-d"],
    ]


def test_start_services_propagates_pull_failure_without_retry():
    runner = RecordingRunner(fail_on="pull")

    with pytest.raises(InstallerError, match="pull"):
        _service().start_services(["docker", "compose"], COMPOSE_FILE, runner)

    assert len(runner.commands) == 1


def test_wait_for_services_succeeds_on_healthy_check(sleeps):
    runner = RecordingRunner(ps_output="backend   running (healthy)", health_codes=[1, 0])

    assert _service().wait_for_services(["docker", "compose"], COMPOSE_FILE, runner) is True

    health = runner.commands[-1]
    assert health[:7] == ["docker", "compose", "-f", str(COMPOSE_FILE), "exec", "-T", "backend"]
    assert "http://localhost:8000/api/health" in health[-1]
    assert sleeps == [2.0]


def test_unhealthy_services_skip_the_health_check(sleeps):
    runner = RecordingRunner(ps_output="worker   running (unhealthy)")

    result = _service(max_attempts=3).wait_for_services(["docker", "compose"], COMPOSE_FILE, runner)

    assert result is False
    assert not any("exec" in cmd for cmd in runner.commands)
    assert sleeps == [2.0, 2.0, 2.0]


def test_wait_for_services_times_out_after_sixty_attempts(sleeps):
    logger = DummyLogger()
    console = Console(record=True, width=120)
    runner = RecordingRunner(ps_output="")

    result = _service(logger=logger, console=console).wait_for_services(
        ["docker", "compose"], COMPOSE_FILE, runner
    )

    assert result is False
    assert len(sleeps) == 60
    assert set(sleeps) == {2.0}
    assert sum("exec" in cmd for cmd in runner.commands) == 60
    output = console.export_text()
    assert "taking longer than expected" in output
    assert "docker compose logs -f" in output
    assert logger.warnings


def test_hung_status_and_health_commands_count_as_not_ready(sleeps):
    runner = RecordingRunner(ps_output="", health_codes=[0], hang_on=["ps", "exec"])

    result = _service(command_timeout_seconds=5.0).wait_for_services(
        ["docker", "compose"], COMPOSE_FILE, runner
    )

    assert result is True
    assert sleeps == [2.0, 2.0]
    assert set(runner.timeouts) == {5.0}


def test_start_services_runs_without_timeout():
    runner = RecordingRunner()

    _service().start_services(["docker", "compose"], COMPOSE_FILE, runner)

    assert runner.timeouts == [None, None]
