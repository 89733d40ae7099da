"""
라이프사이클 플래그 저장소
setup 단계가 내보낸 플래그를 별도 프로세스인 cleanup 단계가 읽음
"""

import os
import sys
from enum import Enum
from dataclasses import dataclass
from typing import Callable, MutableMapping, Optional
from .actions import export_variable
from .logger import get_logger

CLEANUP_ENABLED = "TWINGATE_CLEANUP_ENABLED"
PLATFORM = "TWINGATE_OS"
SETUP_ATTEMPTED = "TWINGATE_SETUP_ATTEMPTED"
INSTALLED = "TWINGATE_INSTALLED"
CONNECTED = "TWINGATE_CONNECTED"


class Platform(Enum):
    """지원 플랫폼"""
    LINUX = "linux"
    WINDOWS = "win32"
    UNSUPPORTED = "unsupported"

    @classmethod
    def resolve(cls, identifier: Optional[str]) -> "Platform":
        if identifier == "linux":
            return cls.LINUX
        if identifier in ("win32", "Windows"):
            return cls.WINDOWS
        return cls.UNSUPPORTED


def current_platform() -> str:
    """현재 플랫폼 식별자 (linux, win32, darwin ...)"""
    return sys.platform


@dataclass
class LifecycleFlags:
    """setup → cleanup 간 전달되는 플래그"""
    cleanup_enabled: bool = False
    setup_attempted: bool = False
    platform_id: str = ""

    @property
    def platform(self) -> Platform:
        return Platform.resolve(self.platform_id)

    @property
    def should_cleanup(self) -> bool:
        return self.cleanup_enabled and self.setup_attempted


class FlagStore:
    """환경 변수 기반 플래그 저장소"""

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None,
                 exporter: Optional[Callable[..., None]] = None):
        self.environ = os.environ if environ is None else environ
        self.exporter = exporter or export_variable
        self.logger = get_logger()

    def _export(self, name: str, value: str):
        self.exporter(name, value, environ=self.environ)

    def record_setup(self, cleanup_enabled: bool, platform_id: str):
        """설치 단계 이전에 세 플래그를 순서대로 기록"""
        self._export(CLEANUP_ENABLED, "true" if cleanup_enabled else "false")
        self._export(PLATFORM, platform_id)
        self._export(SETUP_ATTEMPTED, "true")
        self.logger.debug(f"Recorded lifecycle flags (cleanup={cleanup_enabled}, os={platform_id})")

    def _mark(self, name: str):
        """상태 마커 기록 (실패해도 setup을 실패시키지 않음)"""
        try:
            self._export(name, "true")
        except OSError as e:
            self.logger.warning(f"Failed to export {name}: {e}")

    def mark_installed(self):
        self._mark(INSTALLED)

    def mark_connected(self):
        self._mark(CONNECTED)

    def load(self) -> LifecycleFlags:
        """플래그 읽기 (없으면 비활성/미시도로 간주)"""
        return LifecycleFlags(
            cleanup_enabled=self.environ.get(CLEANUP_ENABLED) == "true",
            setup_attempted=self.environ.get(SETUP_ATTEMPTED) == "true",
            platform_id=self.environ.get(PLATFORM) or current_platform(),
        )
