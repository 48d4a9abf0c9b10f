"""Per-description lifecycle wrapper around the host's notification sink."""
from __future__ import annotations

import logging
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """The four verbs a reporting host accepts."""

    def start(self, description: Any) -> None: ...

    def finish(self, description: Any) -> None: ...

    def fail(self, description: Any, cause: BaseException | None) -> None: ...

    def ignore(self, description: Any) -> None: ...


class UnitNotifier:
    """Notifies the sink about one description.

    A description that is already started (and not finished since) is never
    started again, and is finished or ignored at most once.
    """

    def __init__(self, sink: NotificationSink, description: Any):
        self.sink = sink
        self.description = description
        self.started = False
        self.finished = False
        self.failed = False
        self.ignored = False

    @property
    def running(self) -> bool:
        return self.started and not self.finished

    def start(self) -> None:
        if self.running:
            logger.debug("already started, not starting again: %s", self.description)
            return
        self.started = True
        self.finished = False
        logger.debug("start %s", self.description)
        self.sink.start(self.description)

    def finish(self) -> None:
        if self.finished:
            logger.debug("already finished: %s", self.description)
            return
        self.finished = True
        logger.debug("finish %s", self.description)
        self.sink.finish(self.description)

    def fail(self, cause: BaseException | None) -> None:
        self.failed = True
        logger.debug("fail %s: %r", self.description, cause)
        self.sink.fail(self.description, cause)

    def ignore(self) -> None:
        if self.ignored:
            logger.debug("already ignored: %s", self.description)
            return
        self.ignored = True
        logger.debug("ignore %s", self.description)
        self.sink.ignore(self.description)

    def __repr__(self) -> str:
        return f"UnitNotifier({self.description!r})"
