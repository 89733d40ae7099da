"""
예외 정의
setup 단계의 치명적 오류와 단계별 복구 가능 오류 구분
"""


class TwingateActionError(RuntimeError):
    """액션 기본 예외"""


class InputError(TwingateActionError):
    """필수 입력 누락"""


class CommandError(TwingateActionError):
    """외부 명령 실행 실패"""

    def __init__(self, message: str, result=None):
        super().__init__(message)
        self.result = result


class UnsupportedPlatformError(TwingateActionError):
    pass


class ConnectionFailedError(TwingateActionError):
    """재시도 소진 후에도 online 상태에 도달하지 못함"""


class SetupError(TwingateActionError):
    """플랫폼별 setup 실패 (원본 메시지를 접미사로 보존)"""


class ConfigError(TwingateActionError):
    """설정 파일 형식 오류"""
