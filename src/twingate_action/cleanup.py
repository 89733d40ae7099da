"""
연결 정리 모듈
graceful stop → 서비스 중지 → 프로세스 종료 → 터널 인터페이스 삭제
정리 실패는 잡을 실패시키지 않음
"""

import re
import time
from typing import Callable, List, Tuple
from .config import Config
from .errors import TwingateActionError
from .logger import get_logger
from .runner import CommandRunner
from .state import FlagStore, Platform


class CleanupManager:
    """cleanup 단계 관리 클래스"""

    def __init__(self, runner: CommandRunner, flags: FlagStore, config: Config,
                 sleep: Callable[[float], None] = time.sleep):
        self.runner = runner
        self.flags = flags
        self.config = config
        self.client = config.client
        self.sleep = sleep
        self.logger = get_logger()

    def run(self) -> Tuple[bool, str]:
        """정리 실행 (예외를 밖으로 전파하지 않음)"""
        try:
            lifecycle = self.flags.load()

            if not lifecycle.should_cleanup:
                self.logger.info("Twingate cleanup skipped (not enabled or setup not attempted)")
                return True, "skipped"

            self.logger.info("Starting Twingate cleanup...")

            platform = lifecycle.platform
            if platform == Platform.LINUX:
                self.cleanup_linux()
            elif platform == Platform.WINDOWS:
                self.cleanup_windows()
            else:
                self.logger.warning(f"Cleanup not supported for platform: {lifecycle.platform_id}")
                return True, "unsupported"

            self.logger.info("Twingate connection cleanup process completed")
            self.logger.info("Connection was properly terminated before workflow finish")
            return True, "completed"

        except Exception as e:
            self.logger.warning(f"Cleanup encountered an issue: {e}")
            return False, str(e)

    def _best_effort(self, description: str, step: Callable[[], None]):
        try:
            step()
        except Exception as e:
            self.logger.debug(f"{description} failed: {e}")

    def cleanup_linux(self):
        try:
            self.logger.info("Starting Twingate cleanup for Linux...")
            self._best_effort("Twingate stop command", self._stop_client)
            self._best_effort("Systemctl stop", self._stop_unit)
            self._best_effort("Process kill", self._kill_processes)
            self._best_effort("Network interface cleanup", self._remove_interfaces)
            self.logger.info("Linux Twingate cleanup completed")
        except Exception as e:
            raise TwingateActionError(f"Linux cleanup failed: {e}") from e

    def _stop_client(self):
        if self.runner.which(self.client.binary):
            self.logger.info("Stopping Twingate client...")
            self.runner.run([self.client.binary, "stop"], ignore_errors=True)
            self.sleep(self.config.cleanup.linux_grace_period)

    def _stop_unit(self):
        unit = self.client.service_unit
        if self.runner.run(["systemctl", "is-active", unit], ignore_errors=True).ok:
            self.logger.info("Stopping Twingate systemd service...")
            self.runner.run(["sudo", "systemctl", "stop", unit], ignore_errors=True)

    def _kill_processes(self):
        self.logger.info("Terminating any remaining Twingate processes...")
        self.runner.run(["sudo", "pkill", "-f", self.client.process_pattern], ignore_errors=True)

    def find_interfaces(self, link_output: str) -> List[str]:
        """ip link 출력에서 터널 인터페이스 이름 추출 (중복 제거, 순서 유지)"""
        found = []
        for name in re.findall(self.client.interface_pattern, link_output):
            if name not in found:
                found.append(name)
        return found

    def _remove_interfaces(self):
        result = self.runner.run(["ip", "link", "show"], ignore_errors=True)
        for iface in self.find_interfaces(result.stdout):
            self.logger.info(f"Removing network interface: {iface}")
            self.runner.run(["sudo", "ip", "link", "delete", iface], ignore_errors=True)

    def cleanup_windows(self):
        try:
            self.logger.info("Starting Twingate cleanup for Windows...")
            self._best_effort("Stop-Service", self._stop_windows_service)
            self.sleep(self.config.cleanup.windows_grace_period)
            self._best_effort("Stop-Process", self._kill_windows_processes)
            self.logger.info("Windows Twingate cleanup completed")
        except Exception as e:
            raise TwingateActionError(f"Windows cleanup failed: {e}") from e

    def _stop_windows_service(self):
        self.logger.info("Stopping Twingate service...")
        self.runner.run([
            "powershell", "-Command",
            f'Stop-Service -Name "{self.client.windows_service}" -Force -ErrorAction SilentlyContinue'
        ], ignore_errors=True)

    def _kill_windows_processes(self):
        self.logger.info("Terminating any remaining Twingate processes...")
        self.runner.run([
            "powershell", "-Command",
            f'Get-Process -Name "*{self.client.process_pattern}*" -ErrorAction SilentlyContinue '
            f'| Stop-Process -Force -ErrorAction SilentlyContinue'
        ], ignore_errors=True)
