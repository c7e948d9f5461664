"""rbdoctor's test suite."""

from logging import LogRecord
from typing import Sequence, TYPE_CHECKING

# Approximations of the pytest fixture types, good enough for our test cases:

if TYPE_CHECKING:
    from typing_extensions import Protocol

    class CapLog(Protocol):
        records: Sequence[LogRecord]
        text: str
        def set_level(self, level: int, logger: str = ...) -> None: ...

    class CaptureResult(Protocol):
        out: str
        err: str

    class CapSys(Protocol):
        def readouterr(self) -> CaptureResult: ...

    from _pytest.monkeypatch import MonkeyPatch
else:
    CapLog = CaptureResult = CapSys = MonkeyPatch = object
