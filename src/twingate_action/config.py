"""
설정 관리 모듈
YAML/JSON 기반 설정 파일 관리 및 기본값 제공
"""

import os
import yaml
import json
from typing import Dict, Any, Optional
from dataclasses import dataclass, asdict
from .errors import ConfigError


@dataclass
class RetryPolicy:
    """연결 재시도 정책"""
    max_retries: int = 5
    initial_wait: int = 5
    wait_increment: int = 5


@dataclass
class ClientConfig:
    """Twingate 클라이언트 설정"""
    binary: str = "twingate"
    service_unit: str = "twingate"
    windows_service: str = "twingate.service"
    process_pattern: str = "twingate"
    interface_pattern: str = r"utun\d+"
    log_level: str = "info"
    apt_gpg_key_url: str = "https://packages.twingate.com/apt/gpg.key"
    apt_repository: str = "https://packages.twingate.com/apt/"
    apt_keyring: str = "/usr/share/keyrings/twingate-client-keyring.gpg"
    windows_installer_url: str = "https://api.twingate.com/download/windows?installer=msi"
    windows_installer_file: str = "twingate_client.msi"


@dataclass
class CleanupConfig:
    """정리 단계 설정"""
    linux_grace_period: int = 2
    windows_grace_period: int = 3
    windows_start_wait: int = 10


@dataclass
class LoggingConfig:
    """로깅 설정"""
    log_dir: str = ""
    log_level: str = "INFO"


@dataclass
class ActionInputs:
    """액션 입력"""
    service_key: str = ""
    auto_cleanup: bool = False


class Config:
    """전체 설정 관리 클래스"""

    SECTIONS = ("retry", "client", "cleanup", "logging")

    DEFAULT_CONFIG_PATHS = [
        "/etc/twingate-action/config.yaml",
        "~/.twingate-action/config.yaml",
        "./twingate-action.yaml",
    ]

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path
        self.retry = RetryPolicy()
        self.client = ClientConfig()
        self.cleanup = CleanupConfig()
        self.logging = LoggingConfig()

        if config_path:
            self.load(config_path)
        else:
            self._load_from_default_paths()

    def _load_from_default_paths(self):
        """기본 경로에서 설정 파일 로드"""
        for path in self.DEFAULT_CONFIG_PATHS:
            expanded_path = os.path.expanduser(path)
            if os.path.exists(expanded_path):
                self.load(expanded_path)
                return

    def load(self, path: str):
        """설정 파일 로드"""
        path = os.path.expanduser(path)
        if not os.path.exists(path):
            return

        with open(path, 'r', encoding='utf-8') as f:
            if path.endswith('.json'):
                data = json.load(f)
            else:
                data = yaml.safe_load(f) or {}

        self._update_from_dict(data)
        self.config_path = path

    def _update_from_dict(self, data: Dict[str, Any]):
        """딕셔너리에서 설정 업데이트 (알 수 없는 키 무시)"""
        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a mapping at the top level")

        for section in self.SECTIONS:
            target = getattr(self, section)
            values = data.get(section) or {}
            if not isinstance(values, dict):
                raise ConfigError(f"Config section '{section}' must be a mapping")
            for key, value in values.items():
                if hasattr(target, key):
                    setattr(target, key, value)

    def save(self, path: Optional[str] = None):
        """설정 파일 저장"""
        save_path = path or self.config_path or self.DEFAULT_CONFIG_PATHS[0]
        save_path = os.path.expanduser(save_path)

        directory = os.path.dirname(save_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(save_path, 'w', encoding='utf-8') as f:
            if save_path.endswith('.json'):
                json.dump(self.to_dict(), f, indent=2)
            else:
                yaml.dump(self.to_dict(), f, default_flow_style=False, allow_unicode=True)

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환"""
        return {section: asdict(getattr(self, section)) for section in self.SECTIONS}

    def create_sample(self, output_path: str):
        """샘플 설정 파일 생성"""
        template = """# Twingate Action Configuration File
# 모든 항목은 선택 사항이며 생략 시 기본값 사용

# 연결 재시도 정책 (대기 시간: initial_wait + wait_increment * attempt)
retry:
  max_retries: 5
  initial_wait: 5  # 초
  wait_increment: 5  # 초

# 클라이언트 설정
client:
  binary: "twingate"
  service_unit: "twingate"  # systemd 유닛
  windows_service: "twingate.service"
  process_pattern: "twingate"  # pkill / Get-Process 패턴
  interface_pattern: "utun\\\\d+"  # 정리 대상 터널 인터페이스
  log_level: "info"

# 정리 단계
cleanup:
  linux_grace_period: 2
  windows_grace_period: 3
  windows_start_wait: 10

# 로깅
logging:
  log_dir: ""  # 비워두면 콘솔만 사용
  log_level: "INFO"  # DEBUG, INFO, WARNING, ERROR
"""

        directory = os.path.dirname(output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(template)
