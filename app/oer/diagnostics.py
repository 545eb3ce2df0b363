"""Diagnostics sink for failures that are not shown to the user."""

from __future__ import annotations

import logging
from typing import Optional, Protocol


class DiagnosticsSink(Protocol):
    """Receives failures that are recorded but never surfaced."""

    def report(self, message: str, exc: BaseException) -> None: ...


class LoggingDiagnostics:
    """Default sink: writes each report to a logger at warning level."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger("app.oer.diagnostics")

    def report(self, message: str, exc: BaseException) -> None:
        self._logger.warning("%s: %s", message, exc)
