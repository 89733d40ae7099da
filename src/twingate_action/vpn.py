"""
VPN 연결 관리 모듈
start → 대기 → status 폴링 → 수락/중지 후 재시도/실패 상태 머신
"""

import time
from enum import Enum
from dataclasses import dataclass
from typing import Callable, List, Optional
from .config import ClientConfig, RetryPolicy
from .errors import ConnectionFailedError
from .logger import get_logger
from .runner import CommandRunner
from .state import FlagStore

ONLINE = "online"


def wait_seconds(attempt: int, base_wait: int, increment: int) -> int:
    """0부터 시작하는 attempt 번째 시도의 대기 시간 (초)"""
    return base_wait + increment * attempt


class ConnectionState(Enum):
    IDLE = "idle"
    STARTING = "starting"
    WAITING = "waiting"
    POLLING = "polling"
    ONLINE = "online"
    RETRYING = "retrying"
    EXHAUSTED = "exhausted"


@dataclass
class AttemptRecord:
    """시도 기록"""
    attempt: int
    wait: int
    status: str


class ConnectionManager:
    """Twingate 연결 관리 클래스"""

    def __init__(self, runner: CommandRunner, policy: RetryPolicy, flags: FlagStore,
                 client: Optional[ClientConfig] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.runner = runner
        self.policy = policy
        self.flags = flags
        self.client = client or ClientConfig()
        self.sleep = sleep
        self.logger = get_logger()
        self.state = ConnectionState.IDLE
        self.attempts: List[AttemptRecord] = []

    def _transition(self, state: ConnectionState):
        self.logger.debug(f"Connection state: {self.state.value} -> {state.value}")
        self.state = state

    def _step(self, attempt: int, argv: List[str], echo: bool = False):
        """시도 내 개별 명령 (실패는 경고만 남기고 계속)"""
        try:
            result = self.runner.run(argv, ignore_errors=True, echo=echo)
        except Exception as e:
            self.logger.warning(f"Attempt {attempt} failed: {e}")
            return None
        if not result.ok:
            self.logger.warning(f"Attempt {attempt} failed: {result.describe()}")
        return result

    def start(self, attempt: int):
        binary = self.client.binary
        self._step(attempt, ["sudo", binary, "config", "log-level", self.client.log_level])
        self._step(attempt, [binary, "start"])

    def poll_status(self, attempt: int) -> str:
        result = self._step(attempt, [self.client.binary, "status"])
        if result is None or not result.ok:
            return ""
        return result.stdout.strip()

    def stop(self, attempt: int):
        self._step(attempt, [self.client.binary, "stop"])

    def show_resources(self, attempt: int):
        self._step(attempt, [self.client.binary, "resources"], echo=True)

    def dump_logs(self, attempt: int):
        """서비스 저널 스냅샷 (진단용)"""
        self._step(attempt, ["sudo", "journalctl", "-u", self.client.service_unit, "--no-pager"], echo=True)

    def connect(self) -> int:
        """
        online 상태가 될 때까지 재시도

        Returns:
            int: 연결에 성공한 시도 번호 (1부터)

        Raises:
            ConnectionFailedError: 최대 재시도 후에도 online이 아닌 경우
        """
        max_retries = self.policy.max_retries
        self.attempts = []

        for attempt in range(max_retries):
            number = attempt + 1
            wait = wait_seconds(attempt, self.policy.initial_wait, self.policy.wait_increment)

            self._transition(ConnectionState.STARTING)
            self.logger.info(f"Starting Twingate service (attempt {number}/{max_retries})...")
            self.start(number)

            self._transition(ConnectionState.WAITING)
            self.logger.info(f"Waiting {wait} seconds for Twingate service to start...")
            self.sleep(wait)

            self._transition(ConnectionState.POLLING)
            status = self.poll_status(number)
            self.attempts.append(AttemptRecord(number, wait, status))
            self.logger.info(f"Twingate service status: '{status}'")

            if status == ONLINE:
                self._transition(ConnectionState.ONLINE)
                self.logger.info("Twingate service is connected.")
                self.show_resources(number)
                self.dump_logs(number)
                self.flags.mark_connected()
                return number

            self._transition(ConnectionState.RETRYING)
            self.stop(number)
            self.dump_logs(number)

            if number == max_retries:
                self._transition(ConnectionState.EXHAUSTED)
                raise ConnectionFailedError("Twingate service failed to connect after maximum retries")

            self.logger.info("Twingate service is not connected. Retrying...")

        # max_retries가 0 이하인 경우
        self._transition(ConnectionState.EXHAUSTED)
        raise ConnectionFailedError("Twingate service failed to connect after maximum retries")
