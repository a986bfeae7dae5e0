"""Thread pool helpers for network calls made from the GUI."""

from __future__ import annotations

import traceback
from dataclasses import dataclass
from typing import Optional

from loguru import logger
from PyQt6.QtCore import QObject, QRunnable, pyqtSignal

WORKER_FAILED = object()


@dataclass(frozen=True)
class WorkerError:
    context: Optional[str]
    message: str
    exc_type: str
    traceback: str


class WorkerSignals(QObject):
    finished = pyqtSignal(object)
    error = pyqtSignal(object)


class Worker(QRunnable):
    """Run ``fn`` on the pool; exactly one ``finished`` is emitted per run.

    A failed call emits ``error`` first and then ``finished`` with
    ``WORKER_FAILED`` so callers can tell the two apart.
    """

    def __init__(self, fn, *args, context: Optional[str] = None, **kwargs):
        super().__init__()
        self.fn = fn
        self.args = args
        self.kwargs = kwargs
        self.signals = WorkerSignals()
        self.context = context

    def run(self) -> None:
        result = WORKER_FAILED
        try:
            result = self.fn(*self.args, **self.kwargs)
        except Exception as exc:
            logger.warning(f"Worker {self.context or 'task'} failed: {exc}")
            self.signals.error.emit(
                WorkerError(
                    context=self.context,
                    message=str(exc),
                    exc_type=exc.__class__.__name__,
                    traceback=traceback.format_exc(),
                )
            )
        finally:
            self.signals.finished.emit(result)
