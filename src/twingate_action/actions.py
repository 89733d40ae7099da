"""
CI 러너 연동 모듈
액션 입력 읽기, 잡 환경 변수 내보내기
"""

import os
import uuid
from typing import Mapping, MutableMapping, Optional
from .errors import InputError
from .logger import get_logger


def input_env_name(name: str) -> str:
    """입력 이름 → 러너가 설정하는 환경 변수 이름 (대시는 유지)"""
    return f"INPUT_{name.replace(' ', '_').upper()}"


def get_input(name: str, required: bool = False,
              environ: Optional[Mapping[str, str]] = None) -> str:
    """액션 입력 값 읽기"""
    environ = os.environ if environ is None else environ
    value = environ.get(input_env_name(name), "").strip()
    if required and not value:
        raise InputError(f"Input required and not supplied: {name}")
    return value


def get_flag_input(name: str, environ: Optional[Mapping[str, str]] = None) -> bool:
    """문자열 "true"만 참으로 취급"""
    return get_input(name, environ=environ) == "true"


def export_variable(name: str, value: str,
                    environ: Optional[MutableMapping[str, str]] = None) -> None:
    """
    현재 프로세스 및 이후 잡 스텝에 환경 변수 내보내기

    GITHUB_ENV 파일이 있으면 heredoc 구분자 형식으로 추가 기록한다.
    """
    environ = os.environ if environ is None else environ
    value = str(value)
    environ[name] = value

    env_file = environ.get("GITHUB_ENV")
    if not env_file:
        get_logger().debug(f"GITHUB_ENV not set, exported {name} to current process only")
        return

    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    with open(env_file, 'a', encoding='utf-8') as f:
        f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
    get_logger().debug(f"Exported {name}={value}")
