from typing import Callable

import pytest

from logger import StatusLogger
from tests.fakes import FakeSink


@pytest.fixture
def sink() -> FakeSink:
    return FakeSink()


@pytest.fixture
def status_logger() -> StatusLogger:
    return StatusLogger()


@pytest.fixture
def sleep_hook(sink: FakeSink) -> Callable[[float], None]:
    """Sleep replacement that logs the requested delay into the sink's call list."""

    def _sleep(seconds: float) -> None:
        sink.calls.append(("sleep", seconds))

    return _sleep
