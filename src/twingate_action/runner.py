"""
외부 명령 실행 모듈
실행 결과를 CommandResult로 기록, 무시된 실패를 명시적으로 구분
"""

import subprocess
from enum import Enum
from dataclasses import dataclass
from typing import List, Optional, Sequence
from .errors import CommandError
from .logger import get_logger


class CommandOutcome(Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    IGNORED_FAILURE = "ignored_failure"


@dataclass
class CommandResult:
    """명령 실행 결과"""
    argv: List[str]
    outcome: CommandOutcome
    exit_code: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome == CommandOutcome.SUCCEEDED

    @property
    def command(self) -> str:
        return " ".join(self.argv)

    def describe(self) -> str:
        """실패 원인 요약"""
        if self.error:
            return self.error
        detail = self.stderr.strip() or self.stdout.strip()
        message = f"'{self.command}' exited with code {self.exit_code}"
        return f"{message}: {detail}" if detail else message


class CommandRunner:
    """외부 명령 실행기"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.logger = get_logger()
        self.history: List[CommandResult] = []

    def run(self, argv: Sequence[str], ignore_errors: bool = False,
            echo: bool = False) -> CommandResult:
        """
        명령 실행

        Args:
            argv: 실행할 명령과 인자
            ignore_errors: True면 실패 시 예외 대신 IGNORED_FAILURE 결과 반환
            echo: True면 표준 출력을 info 로그로 기록

        Raises:
            CommandError: ignore_errors가 False이고 명령이 실패한 경우
        """
        argv = [str(arg) for arg in argv]
        self.logger.info(f"[command]{' '.join(argv)}")
        result = self._execute(argv)

        if echo and result.stdout.strip():
            self.logger.info(result.stdout.rstrip())
        elif result.stdout.strip():
            self.logger.debug(result.stdout.rstrip())

        if not result.ok and ignore_errors:
            result.outcome = CommandOutcome.IGNORED_FAILURE
            self.logger.debug(f"Ignored failure: {result.describe()}")

        self.history.append(result)

        if result.outcome == CommandOutcome.FAILED:
            raise CommandError(result.describe(), result)
        return result

    def which(self, name: str) -> bool:
        """PATH에서 실행 파일 탐색"""
        return self.run(["which", name], ignore_errors=True).ok

    def _execute(self, argv: List[str]) -> CommandResult:
        try:
            completed = subprocess.run(
                argv,
                capture_output=True,
                text=True
            )
        except (OSError, subprocess.SubprocessError) as e:
            return CommandResult(
                argv=argv,
                outcome=CommandOutcome.FAILED,
                error=f"Unable to run '{' '.join(argv)}': {e}",
            )

        return CommandResult(
            argv=argv,
            outcome=CommandOutcome.SUCCEEDED if completed.returncode == 0 else CommandOutcome.FAILED,
            exit_code=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
