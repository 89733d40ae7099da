"""
로깅 시스템 테스트
"""

import io
import logging
import os
import pytest
from rich.logging import RichHandler
from twingate_action.logger import ActionLogger, WorkflowCommandHandler, escape_data, init_logger


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    logger = logging.getLogger("twingate_action")
    for handler in logger.handlers:
        handler.close()
    init_logger(None, "INFO", False)


def emit(handler, level, message):
    record = logging.makeLogRecord({
        "name": "twingate_action",
        "levelno": level,
        "levelname": logging.getLevelName(level),
        "msg": message,
    })
    handler.emit(record)


def test_escape_data():
    assert escape_data("100%\r\nnext") == "100%25%0D%0Anext"


def test_workflow_command_prefixes():
    """레벨별 워크플로 명령 접두사"""
    stream = io.StringIO()
    handler = WorkflowCommandHandler(stream=stream)

    emit(handler, logging.WARNING, "Cleanup encountered an issue: boom")
    emit(handler, logging.DEBUG, "Ignored failure")
    emit(handler, logging.INFO, "Starting Twingate cleanup...")
    emit(handler, logging.ERROR, "Action failed:\nLinux setup failed: 100%")

    assert stream.getvalue().splitlines() == [
        "::warning::Cleanup encountered an issue: boom",
        "::debug::Ignored failure",
        "Starting Twingate cleanup...",
        "::error::Action failed:%0ALinux setup failed: 100%25",
    ]


def test_actions_mode_uses_workflow_handler(monkeypatch):
    monkeypatch.setenv("GITHUB_ACTIONS", "true")

    action_logger = ActionLogger()
    handlers = action_logger.logger.handlers

    assert action_logger.actions_mode is True
    assert any(isinstance(h, WorkflowCommandHandler) for h in handlers)
    assert not any(isinstance(h, RichHandler) for h in handlers)
    assert action_logger.logger.level == logging.DEBUG


def test_console_mode_uses_rich(monkeypatch):
    monkeypatch.delenv("GITHUB_ACTIONS", raising=False)

    action_logger = ActionLogger(log_level="WARNING")
    handlers = action_logger.logger.handlers

    assert any(isinstance(h, RichHandler) for h in handlers)
    assert action_logger.logger.level == logging.WARNING
    assert action_logger.get_log_files()["main_log"] is None


def test_log_dir_creates_files(tmp_path, monkeypatch):
    """log_dir 지정 시 agent_/error_ 로그 파일 생성"""
    monkeypatch.delenv("GITHUB_ACTIONS", raising=False)
    log_dir = tmp_path / "logs"

    action_logger = ActionLogger(str(log_dir), "INFO", debug=True)
    action_logger.error("setup failed")
    for handler in action_logger.logger.handlers:
        handler.flush()

    files = action_logger.get_log_files()
    assert os.path.basename(files["main_log"]).startswith("agent_")
    assert os.path.basename(files["error_log"]).startswith("error_")
    assert os.path.exists(files["main_log"])
    assert os.path.exists(files["error_log"])
    with open(files["error_log"], encoding="utf-8") as f:
        assert "setup failed" in f.read()
    assert action_logger.logger.level == logging.DEBUG
