import subprocess
from datetime import datetime, timezone

import pytest

import flowwinstaller.services.docker_runtime as docker_runtime_module
from flowwinstaller.core import FlowwInstaller, InstallerError

FIXED_NOW = datetime(2024, 5, 1, 8, 0, 0, tzinfo=timezone.utc)


class FakeRunner:
    def __init__(self, failing=(), health_code=0):
        self.failing = set(failing)
        self.health_code = health_code
        self.commands = []

    def run(self, cmd, check=True, capture_output=False, timeout=None):
        self.commands.append(list(cmd))
        returncode = 1 if any(part in self.failing for part in cmd) else 0
        if "exec" in cmd:
            returncode = self.health_code
        if returncode and check:
            raise InstallerError(f"Command failed ({returncode}): {' '.join(cmd)}")
        return subprocess.CompletedProcess(cmd, returncode, stdout="", stderr="")


class OfflineRequests:
    class RequestException(Exception):
        pass

    def get(self, *_args, **_kwargs):
        raise self.RequestException("offline")


@pytest.fixture
def templates(tmp_path):
    source = tmp_path / "templates"
    source.mkdir()
    (source / "docker-compose.yml").write_text(
        "x-url: {{PROTOCOL}}://{{DOMAIN}}\nx-org: {{ORG_NAME}}\n", encoding="utf-8"
    )
    (source / "Caddyfile.template").write_text(
        "{\n    email {{ADMIN_EMAIL}}\n}\n{{DOMAIN}} {\n}\n", encoding="utf-8"
    )
    return source


@pytest.fixture
def no_sleep(monkeypatch):
    calls = []
    monkeypatch.setattr(docker_runtime_module.time, "sleep", lambda seconds: calls.append(seconds))
    return calls


def build_installer(tmp_path, templates, prompts, runner, docker_installed=True, **kwargs):
    installer = FlowwInstaller(
        install_dir=str(tmp_path / "floww"),
        templates_url=str(templates),
        prompts=prompts,
        requests_module=OfflineRequests(),
        which=lambda name: f"/usr/bin/{name}" if docker_installed else None,
        clock=lambda: FIXED_NOW,
        **kwargs,
    )
    installer.command_runner = runner
    return installer


def test_run_installs_localhost_stack(tmp_path, templates, scripted_prompts, no_sleep):
    runner = FakeRunner()
    installer = build_installer(tmp_path, templates, scripted_prompts(), runner)

    assert installer.run() == 0

    install_dir = tmp_path / "floww"
    assert (install_dir / "docker-compose.yml").read_text(encoding="utf-8") == (
        "x-url: http://localhost\nx-org: default\n"
    )
    assert "http://localhost {" in (install_dir / "Caddyfile").read_text(encoding="utf-8")
    env_lines = (install_dir / ".env").read_text(encoding="utf-8").splitlines()
    assert "# Generated: 2024-05-01 08:00:00 UTC" in env_lines
    assert "DOMAIN=localhost" in env_lines
    assert (install_dir / "logs").is_dir()
    assert sorted(path.name for path in install_dir.iterdir()) == [
        ".env",
        "Caddyfile",
        "docker-compose.yml",
        "logs",
    ]

    compose_file = str(install_dir / "docker-compose.yml")
    assert ["docker", "compose", "-f", compose_file, "pull"] in runner.commands
    assert ["docker", "compose", "-f", compose_file, "up", "-d"] in runner.commands
    assert no_sleep == []


def test_readiness_timeout_still_succeeds(tmp_path, templates, scripted_prompts, no_sleep):
    runner = FakeRunner(health_code=1)
    installer = build_installer(
        tmp_path,
        templates,
        scripted_prompts(),
        runner,
        readiness_attempts=3,
        readiness_interval_seconds=0.5,
    )

    assert installer.run() == 0
    assert no_sleep == [0.5, 0.5, 0.5]


def test_declined_overwrite_exits_non_zero_and_keeps_directory(tmp_path, templates, scripted_prompts):
    install_dir = tmp_path / "floww"
    install_dir.mkdir()
    (install_dir / ".env").write_text("DOMAIN=previous\n", encoding="utf-8")
    runner = FakeRunner()
    installer = build_installer(tmp_path, templates, scripted_prompts(confirms=[False, False]), runner)

    assert installer.run() == 1

    assert (install_dir / ".env").read_text(encoding="utf-8") == "DOMAIN=previous\n"
    assert not any("pull" in cmd for cmd in runner.commands)


def test_missing_docker_aborts_before_prompting(tmp_path, templates, scripted_prompts):
    prompts = scripted_prompts()
    installer = build_installer(tmp_path, templates, prompts, FakeRunner(), docker_installed=False)

    assert installer.run() == 1

    assert prompts.asked == []
    assert not (tmp_path / "floww").exists()


def test_missing_template_aborts(tmp_path, templates, scripted_prompts):
    (templates / "Caddyfile.template").unlink()
    runner = FakeRunner()
    installer = build_installer(tmp_path, templates, scripted_prompts(), runner)

    assert installer.run() == 1
    assert not any("up" in cmd for cmd in runner.commands)


def test_failed_pull_aborts(tmp_path, templates, scripted_prompts):
    runner = FakeRunner(failing={"pull"})
    installer = build_installer(tmp_path, templates, scripted_prompts(), runner)

    assert installer.run() == 1
    assert not any("up" in cmd for cmd in runner.commands)


def test_skip_start_only_renders(tmp_path, templates, scripted_prompts):
    runner = FakeRunner()
    installer = build_installer(tmp_path, templates, scripted_prompts(), runner, skip_start=True)

    assert installer.run() == 0
    assert (tmp_path / "floww" / ".env").exists()
    assert not any("pull" in cmd for cmd in runner.commands)


def test_keyboard_interrupt_returns_failure(tmp_path, templates, scripted_prompts):
    class InterruptingPrompts(scripted_prompts):
        def ask(self, text, default="", password=False):
            raise KeyboardInterrupt

    installer = build_installer(tmp_path, templates, InterruptingPrompts(), FakeRunner())

    assert installer.run() == 1


def test_invalid_readiness_attempts_rejected(tmp_path, templates, scripted_prompts):
    with pytest.raises(InstallerError, match="readiness_attempts"):
        build_installer(tmp_path, templates, scripted_prompts(), FakeRunner(), readiness_attempts=0)
