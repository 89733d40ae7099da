"""
로깅 시스템
콘솔(Rich 또는 워크플로 명령), 선택적 파일 로깅, 디버그 모드 지원
"""

import logging
import os
import sys
from datetime import datetime
from typing import Optional
from rich.logging import RichHandler
from rich.console import Console

console = Console()


def escape_data(message: str) -> str:
    """워크플로 명령 데이터 이스케이프"""
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class WorkflowCommandHandler(logging.Handler):
    """CI 러너 워크플로 명령 형식(::warning:: 등)으로 출력하는 핸들러"""

    PREFIXES = {
        logging.DEBUG: "::debug::",
        logging.WARNING: "::warning::",
        logging.ERROR: "::error::",
        logging.CRITICAL: "::error::",
    }

    def __init__(self, stream=None):
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord):
        try:
            message = self.format(record)
            prefix = self.PREFIXES.get(record.levelno)
            line = f"{prefix}{escape_data(message)}" if prefix else message
            stream = self.stream or sys.stdout
            stream.write(line + "\n")
            stream.flush()
        except Exception:
            self.handleError(record)


class ActionLogger:
    """액션 로거"""

    def __init__(self, log_dir: Optional[str] = None, log_level: str = "INFO", debug: bool = False):
        self.log_dir = log_dir or None
        self.log_level = logging.DEBUG if debug else getattr(logging, log_level.upper())
        self.debug_mode = debug
        self.log_file = None
        self.error_file = None
        self.actions_mode = os.environ.get("GITHUB_ACTIONS") == "true"

        # 로거 설정
        self.logger = logging.getLogger("twingate_action")
        self.logger.setLevel(logging.DEBUG if self.actions_mode else self.log_level)

        # 기존 핸들러 제거
        self.logger.handlers.clear()

        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        if self.log_dir:
            os.makedirs(self.log_dir, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            self.log_file = os.path.join(self.log_dir, f"agent_{timestamp}.log")
            self.error_file = os.path.join(self.log_dir, f"error_{timestamp}.log")

            # 파일 핸들러
            file_handler = logging.FileHandler(self.log_file, encoding='utf-8')
            file_handler.setLevel(self.log_level)
            file_handler.setFormatter(file_formatter)
            self.logger.addHandler(file_handler)

            # 에러 파일 핸들러
            error_handler = logging.FileHandler(self.error_file, encoding='utf-8')
            error_handler.setLevel(logging.ERROR)
            error_handler.setFormatter(file_formatter)
            self.logger.addHandler(error_handler)

        if self.actions_mode:
            # ::debug:: 라인은 러너가 step debug 활성화 시에만 표시
            workflow_handler = WorkflowCommandHandler()
            workflow_handler.setLevel(logging.DEBUG)
            self.logger.addHandler(workflow_handler)
        else:
            # 콘솔 핸들러 (Rich)
            rich_handler = RichHandler(
                console=console,
                rich_tracebacks=True,
                show_time=False,
                show_path=debug
            )
            rich_handler.setLevel(self.log_level)
            self.logger.addHandler(rich_handler)

    def debug(self, message: str):
        """디버그 로그"""
        self.logger.debug(message)

    def info(self, message: str):
        """정보 로그"""
        self.logger.info(message)

    def warning(self, message: str):
        """경고 로그"""
        self.logger.warning(message)

    def error(self, message: str):
        """에러 로그"""
        self.logger.error(message)

    def exception(self, message: str):
        """예외 로그 (트레이스백 포함)"""
        self.logger.exception(message)

    def get_log_files(self) -> dict:
        """로그 파일 경로 반환"""
        return {
            "main_log": self.log_file,
            "error_log": self.error_file,
            "log_dir": self.log_dir
        }


# 글로벌 로거 인스턴스
_logger: Optional[ActionLogger] = None


def get_logger(log_dir: Optional[str] = None,
               log_level: str = "INFO",
               debug: bool = False) -> ActionLogger:
    """로거 인스턴스 가져오기"""
    global _logger
    if _logger is None:
        _logger = ActionLogger(log_dir, log_level, debug)
    return _logger


def init_logger(log_dir: Optional[str], log_level: str, debug: bool) -> ActionLogger:
    """로거 초기화"""
    global _logger
    _logger = ActionLogger(log_dir, log_level, debug)
    return _logger
