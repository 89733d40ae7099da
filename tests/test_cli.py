"""
CLI 테스트
"""

import pytest
from click.testing import CliRunner
from twingate_action import cli as cli_module
from twingate_action.cli import cli, resolve_inputs
from twingate_action.errors import InputError
from twingate_action.state import CLEANUP_ENABLED, PLATFORM, SETUP_ATTEMPTED


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GITHUB_ENV", raising=False)
    for name in (CLEANUP_ENABLED, SETUP_ATTEMPTED, PLATFORM,
                 "INPUT_SERVICE-KEY", "INPUT_AUTO-CLEANUP"):
        monkeypatch.delenv(name, raising=False)


def test_resolve_inputs_from_env(monkeypatch):
    monkeypatch.setenv("INPUT_SERVICE-KEY", "abc123")
    monkeypatch.setenv("INPUT_AUTO-CLEANUP", "true")

    inputs = resolve_inputs(None, None)
    assert inputs.service_key == "abc123"
    assert inputs.auto_cleanup is True

    assert resolve_inputs("other", False).auto_cleanup is False


def test_resolve_inputs_requires_service_key():
    with pytest.raises(InputError):
        resolve_inputs(None, None)


def test_setup_without_service_key_fails():
    result = CliRunner().invoke(cli, ["setup"])
    assert result.exit_code == 1


def test_setup_failure_exits_nonzero(monkeypatch):
    class FailingController:
        def __init__(self, *args, **kwargs):
            self.execution_log = []

        def run(self, inputs):
            from twingate_action.errors import SetupError
            raise SetupError("Linux setup failed: boom")

    monkeypatch.setattr(cli_module, "SetupController", FailingController)
    result = CliRunner().invoke(cli, ["setup", "--service-key", "abc123"])
    assert result.exit_code == 1


def test_cleanup_skipped_exits_zero(monkeypatch):
    calls = []
    monkeypatch.setattr(cli_module.CommandRunner, "_execute", lambda self, argv: calls.append(argv))
    monkeypatch.setenv(CLEANUP_ENABLED, "false")

    result = CliRunner().invoke(cli, ["cleanup"])

    assert result.exit_code == 0
    assert calls == []


def test_cleanup_never_fails(monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("unexpected")

    monkeypatch.setattr(cli_module, "CleanupManager", broken)
    result = CliRunner().invoke(cli, ["cleanup"])
    assert result.exit_code == 0


def test_init_and_validate(tmp_path):
    output = tmp_path / "twingate-action.yaml"
    runner = CliRunner()

    result = runner.invoke(cli, ["init", str(output)])
    assert result.exit_code == 0
    assert output.exists()

    result = runner.invoke(cli, ["validate", "--config", str(output)])
    assert result.exit_code == 0


def test_setup_invalid_config_exits_cleanly(tmp_path):
    config = tmp_path / "bad.yaml"
    config.write_text("- not\n- a mapping\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["setup", "--config", str(config), "--service-key", "abc123"])

    assert result.exit_code == 1
    assert not isinstance(result.exception, AttributeError)


def test_cleanup_with_missing_config_exits_zero(tmp_path):
    """존재하지 않는 설정 경로도 cleanup을 실패시키지 않음"""
    result = CliRunner().invoke(cli, ["cleanup", "--config", str(tmp_path / "missing.yaml")])
    assert result.exit_code == 0


def test_cleanup_with_invalid_config_exits_zero(tmp_path):
    config = tmp_path / "bad.yaml"
    config.write_text("just a string\n", encoding="utf-8")

    result = CliRunner().invoke(cli, ["cleanup", "--config", str(config)])
    assert result.exit_code == 0


def test_setup_summary_shows_log_files(tmp_path, monkeypatch):
    monkeypatch.delenv("GITHUB_ACTIONS", raising=False)
    log_dir = tmp_path / "logs"
    config = tmp_path / "twingate-action.yaml"
    config.write_text(f"logging:\n  log_dir: \"{log_dir}\"\n", encoding="utf-8")

    class SucceedingController:
        def __init__(self, *args, **kwargs):
            self.execution_log = [{"step": "Connect", "status": "success", "message": "attempt 1"}]

        def run(self, inputs):
            pass

    monkeypatch.setattr(cli_module, "SetupController", SucceedingController)
    result = CliRunner().invoke(cli, ["setup", "--config", str(config), "--service-key", "abc123"])

    assert result.exit_code == 0
    assert "로그 파일" in result.output
    assert list(log_dir.glob("agent_*.log"))
