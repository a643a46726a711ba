"""Line-oriented report sink for human or NDJSON output."""

from __future__ import annotations

import json
import logging
import sys
import time
from typing import Any, Awaitable, Callable, Optional, Set, TextIO

from constants import ExitCodes
from errors import FocusError

logger = logging.getLogger(__name__)


class StreamReport:
    """Collects progress messages and the overall outcome of a run.

    In JSON mode every event is written as one JSON object per line with
    ``type``, ``name`` and ``data`` keys.
    """

    def __init__(self, *, json_output: bool = False, stdout: Optional[TextIO] = None, include_logs: bool = True):
        self._json = json_output
        self._stdout = stdout if stdout is not None else sys.stdout
        self._include_logs = include_logs
        self._error_count = 0
        self._warning_count = 0
        self._exit_code = ExitCodes.SUCCESS.value
        self._reported: Set[int] = set()
        self._started_at = time.monotonic()

    @classmethod
    async def start(
        cls,
        *,
        callback: Callable[["StreamReport"], Awaitable[Any]],
        json_output: bool = False,
        stdout: Optional[TextIO] = None,
        include_logs: bool = True,
    ) -> "StreamReport":
        """Run ``callback`` inside a report and return the finished report.

        Any exception raised by the callback is reported once and turns into
        the report's exit code. A :class:`FocusError` carries its own exit
        code; anything else exits with a generic failure.
        """
        report = cls(json_output=json_output, stdout=stdout, include_logs=include_logs)
        try:
            await callback(report)
        except FocusError as e:
            report.report_exception_once(e)
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.debug("Unexpected error during run", exc_info=True)
            report.report_exception_once(e)
        finally:
            report.finalize()
        return report

    def _emit(self, kind: str, name: str, message: str) -> None:
        if self._json:
            self._stdout.write(json.dumps({"type": kind, "name": name, "data": message}) + "\n")
        elif kind == "info":
            self._stdout.write(f"➤ {message}\n")
        else:
            self._stdout.write(f"➤ {kind}: {message}\n")
        self._stdout.flush()

    def report_info(self, name: str, message: str) -> None:
        logger.debug("%s: %s", name, message)
        if self._include_logs:
            self._emit("info", name, message)

    def report_warning(self, name: str, message: str) -> None:
        self._warning_count += 1
        logger.debug("%s: %s", name, message)
        self._emit("warning", name, message)

    def report_error(self, name: str, message: str, exit_code: int = ExitCodes.FAILURE.value) -> None:
        self._error_count += 1
        if self._exit_code == ExitCodes.SUCCESS.value:
            self._exit_code = exit_code
        self._emit("error", name, message)

    def report_exception_once(self, error: BaseException) -> None:
        """Report ``error`` unless this exact exception was already reported."""
        if id(error) in self._reported:
            return
        self._reported.add(id(error))
        exit_code = getattr(error, "exit_code", ExitCodes.FAILURE.value)
        self.report_error(type(error).__name__, str(error), exit_code=exit_code)

    def has_errors(self) -> bool:
        return self._error_count > 0

    def finalize(self) -> None:
        elapsed = time.monotonic() - self._started_at
        if self.has_errors():
            self._emit("info", "summary", f"Failed with errors in {elapsed:.2f}s")
        elif self._warning_count:
            self._emit("info", "summary", f"Done with warnings in {elapsed:.2f}s")
        else:
            self._emit("info", "summary", f"Done in {elapsed:.2f}s")

    def exit_code(self) -> int:
        return self._exit_code if self.has_errors() else ExitCodes.SUCCESS.value
