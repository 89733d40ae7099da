"""
공용 테스트 픽스처
"""

import pytest
from twingate_action.config import Config
from twingate_action.runner import CommandOutcome, CommandResult, CommandRunner
from twingate_action.state import FlagStore


class FakeRunner(CommandRunner):
    """외부 명령 대신 미리 정한 결과를 돌려주는 러너

    응답은 명령 문자열 접두사로 매칭하며, 여러 개를 주면 순서대로 소비하고
    마지막 응답은 계속 재사용한다.
    """

    def __init__(self):
        super().__init__()
        self.calls = []
        self.responses = {}
        self.raises = {}
        self.hooks = {}

    def script(self, prefix, *responses):
        """responses: (exit_code, stdout) 튜플 또는 stdout 문자열"""
        self.responses[prefix] = [
            r if isinstance(r, tuple) else (0, r) for r in responses
        ]

    def fail(self, prefix, error):
        self.raises[prefix] = error

    def on(self, prefix, callback):
        self.hooks[prefix] = callback

    def _match(self, table, command):
        for prefix, value in table.items():
            if command.startswith(prefix):
                return value
        return None

    def _execute(self, argv):
        command = " ".join(argv)
        self.calls.append(command)

        hook = self._match(self.hooks, command)
        if hook:
            hook(argv)

        error = self._match(self.raises, command)
        if error:
            raise error

        queue = self._match(self.responses, command)
        exit_code, stdout = 0, ""
        if queue:
            exit_code, stdout = queue.pop(0) if len(queue) > 1 else queue[0]

        return CommandResult(
            argv=argv,
            outcome=CommandOutcome.SUCCEEDED if exit_code == 0 else CommandOutcome.FAILED,
            exit_code=exit_code,
            stdout=stdout,
        )

    def count(self, command):
        return sum(1 for call in self.calls if call == command)


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def environ():
    return {}


@pytest.fixture
def flags(environ):
    return FlagStore(environ=environ)


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def sleep(sleeps):
    return sleeps.append


@pytest.fixture
def config(tmp_path):
    # 존재하지 않는 경로 → 기본값만 사용
    return Config(str(tmp_path / "missing.yaml"))
