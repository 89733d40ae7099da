"""
클라이언트 설치 모듈
Linux(apt) / Windows(msi) 설치 및 서비스 키 파일 관리
"""

import os
import shutil
import tempfile
from .config import ClientConfig
from .logger import get_logger
from .runner import CommandRunner


class CredentialFile:
    """
    서비스 키 임시 파일

    비공개 임시 디렉토리에 키를 그대로 기록하고, 블록 종료 시
    성공/실패와 무관하게 삭제를 시도한다. 삭제 실패는 무시한다.
    """

    FILE_NAME = "twingate-key.json"

    def __init__(self, service_key: str, directory: str = None):
        self.service_key = service_key
        self.directory = directory
        self.path = None
        self._owned_dir = None
        self.logger = get_logger()

    def __enter__(self) -> str:
        if self.directory is None:
            self._owned_dir = tempfile.mkdtemp(prefix="twingate-")
        base = self.directory or self._owned_dir
        self.path = os.path.join(base, self.FILE_NAME)

        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
            f.write(self.service_key)
        self.logger.debug(f"Service key written to {self.path}")
        return self.path

    def __exit__(self, exc_type, exc, tb):
        self.remove()
        return False

    def remove(self):
        try:
            if self.path and os.path.exists(self.path):
                os.unlink(self.path)
            if self._owned_dir:
                shutil.rmtree(self._owned_dir, ignore_errors=True)
            self.logger.debug("Service key file removed")
        except OSError as e:
            self.logger.debug(f"Failed to remove service key file: {e}")


class LinuxInstaller:
    """apt 기반 클라이언트 설치"""

    def __init__(self, runner: CommandRunner, client: ClientConfig):
        self.runner = runner
        self.client = client
        self.logger = get_logger()

    def install(self):
        self.logger.info("Installing Twingate client for Linux...")
        keyring = self.client.apt_keyring

        self.runner.run(["sudo", "apt-get", "update", "-qq"])
        self.runner.run(["sudo", "apt-get", "install", "-y", "curl", "gnupg", "ca-certificates"])
        self.runner.run([
            "bash", "-c",
            f"curl -fsSL {self.client.apt_gpg_key_url} | sudo gpg --dearmor --yes -o {keyring}"
        ])
        self.runner.run([
            "bash", "-c",
            f'echo "deb [signed-by={keyring}] {self.client.apt_repository} * *" '
            f"| sudo tee /etc/apt/sources.list.d/twingate.list"
        ])
        self.runner.run(["sudo", "apt-get", "update", "-yq"])
        self.runner.run(["sudo", "apt-get", "install", "-yq", self.client.binary])
        self.logger.info("Twingate client installed")

    def headless_setup(self, key_path: str):
        """서비스 키로 비대화형 설정"""
        self.logger.info("Setting up and starting Twingate service...")
        self.runner.run(["sudo", self.client.binary, "setup", "--headless", key_path])


class WindowsInstaller:
    """msi 기반 클라이언트 설치"""

    def __init__(self, runner: CommandRunner, client: ClientConfig):
        self.runner = runner
        self.client = client
        self.logger = get_logger()

    def _powershell(self, command: str, **kwargs):
        return self.runner.run(["powershell", "-Command", command], **kwargs)

    def download(self):
        self.logger.info("Installing Twingate client for Windows...")
        self._powershell(
            f"Invoke-WebRequest '{self.client.windows_installer_url}' "
            f"-OutFile .\\{self.client.windows_installer_file}"
        )

    def install(self, key_path: str):
        self._powershell(
            f'Start-Process msiexec.exe -Wait -ArgumentList '
            f'\'/i {self.client.windows_installer_file} service_secret="{key_path}" /quiet\''
        )

    def start_service(self):
        self._powershell(f"Start-Service {self.client.windows_service}")

    def service_status(self):
        return self._powershell(f"Get-Service {self.client.windows_service}", echo=True)
