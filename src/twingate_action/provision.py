"""
연결 setup 컨트롤러
플래그 기록 → 설치 → 서비스 키 → headless 설정 → 연결
"""

import time
from typing import Callable, Dict, List, Optional
from .config import ActionInputs, Config
from .errors import SetupError, UnsupportedPlatformError
from .installer import CredentialFile, LinuxInstaller, WindowsInstaller
from .logger import get_logger
from .runner import CommandRunner
from .state import FlagStore, Platform, current_platform
from .vpn import ConnectionManager


class SetupController:
    """setup 단계 오케스트레이터"""

    def __init__(self, runner: CommandRunner, flags: FlagStore, config: Config,
                 sleep: Callable[[float], None] = time.sleep,
                 key_dir: Optional[str] = None):
        self.runner = runner
        self.flags = flags
        self.config = config
        self.sleep = sleep
        self.key_dir = key_dir
        self.logger = get_logger()
        self.connection = None
        self.execution_log: List[Dict[str, str]] = []

    def log_step(self, step: str, status: str, message: str = ""):
        """실행 단계 기록"""
        self.execution_log.append({
            "step": step,
            "status": status,
            "message": message
        })

    def run(self, inputs: ActionInputs, platform_id: Optional[str] = None):
        """
        setup 실행

        Raises:
            UnsupportedPlatformError: 지원하지 않는 플랫폼
            SetupError: 플랫폼별 설치/연결 실패
        """
        platform_id = platform_id or current_platform()

        # 설치 전에 기록해야 cleanup이 시도 여부를 알 수 있음
        self.flags.record_setup(inputs.auto_cleanup, platform_id)
        self.logger.info("Setting up Twingate connection...")

        platform = Platform.resolve(platform_id)
        if platform == Platform.LINUX:
            self.setup_linux(inputs.service_key)
        elif platform == Platform.WINDOWS:
            self.setup_windows(inputs.service_key)
        else:
            self.log_step("Platform", "failed", platform_id)
            raise UnsupportedPlatformError(f"Unsupported platform: {platform_id}")

        self.logger.info("Twingate connection established successfully")

    def setup_linux(self, service_key: str):
        try:
            installer = LinuxInstaller(self.runner, self.config.client)
            installer.install()
            self.flags.mark_installed()
            self.log_step("Install", "success", "apt")

            with CredentialFile(service_key, self.key_dir) as key_path:
                installer.headless_setup(key_path)
                self.log_step("Headless setup", "success")

                self.connection = ConnectionManager(
                    self.runner, self.config.retry, self.flags,
                    client=self.config.client, sleep=self.sleep
                )
                attempt = self.connection.connect()
                self.log_step("Connect", "success", f"attempt {attempt}")
        except Exception as e:
            self.log_step("Linux setup", "failed", str(e))
            raise SetupError(f"Linux setup failed: {e}") from e

    def setup_windows(self, service_key: str):
        # 키 파일은 작업 디렉토리 대신 Linux와 동일하게 비공개 임시 디렉토리에 기록
        try:
            installer = WindowsInstaller(self.runner, self.config.client)
            installer.download()
            self.log_step("Download", "success", "msi")

            with CredentialFile(service_key, self.key_dir) as key_path:
                installer.install(key_path)
                self.flags.mark_installed()
                self.log_step("Install", "success", "msi")

            installer.start_service()
            self.sleep(self.config.cleanup.windows_start_wait)
            installer.service_status()
            self.flags.mark_connected()
            self.log_step("Connect", "success", "service")
        except Exception as e:
            self.log_step("Windows setup", "failed", str(e))
            raise SetupError(f"Windows setup failed: {e}") from e
