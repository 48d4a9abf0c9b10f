"""Concrete notification sinks: record, fan out, or print."""
from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TextIO

from step_notifier.types import FAIL, FINISH, IGNORE, START

if TYPE_CHECKING:
    from collections.abc import Iterable

    from step_notifier.notify.notifier import NotificationSink


@dataclass(frozen=True)
class Notification:
    verb: str  # start | finish | fail | ignore
    description: Any
    cause: BaseException | None = None

    def __str__(self) -> str:
        line = f"{self.verb:<7}{self.description}"
        if self.cause is not None:
            line += f"  [{type(self.cause).__name__}: {self.cause}]"
        return line


class RecordingSink:
    """Keeps every notification in call order."""

    def __init__(self):
        self.notifications: list[Notification] = []

    def start(self, description: Any) -> None:
        self.notifications.append(Notification(START, description))

    def finish(self, description: Any) -> None:
        self.notifications.append(Notification(FINISH, description))

    def fail(self, description: Any, cause: BaseException | None) -> None:
        self.notifications.append(Notification(FAIL, description, cause))

    def ignore(self, description: Any) -> None:
        self.notifications.append(Notification(IGNORE, description))

    def calls(self, verb: str) -> list[Notification]:
        return [n for n in self.notifications if n.verb == verb]

    def for_description(self, description: Any) -> list[Notification]:
        return [n for n in self.notifications if n.description == description]

    def verbs(self, description: Any = None) -> list[str]:
        source = self.notifications if description is None else self.for_description(description)
        return [n.verb for n in source]

    def clear(self) -> None:
        self.notifications.clear()

    def __len__(self) -> int:
        return len(self.notifications)


class MulticastSink:
    """Forwards each notification to every sink, in registration order."""

    def __init__(self, sinks: Iterable[NotificationSink] = ()):
        self.sinks: list[NotificationSink] = list(sinks)

    def add(self, sink: NotificationSink) -> None:
        self.sinks.append(sink)

    def start(self, description: Any) -> None:
        for sink in self.sinks:
            sink.start(description)

    def finish(self, description: Any) -> None:
        for sink in self.sinks:
            sink.finish(description)

    def fail(self, description: Any, cause: BaseException | None) -> None:
        for sink in self.sinks:
            sink.fail(description, cause)

    def ignore(self, description: Any) -> None:
        for sink in self.sinks:
            sink.ignore(description)


class StreamSink:
    """Writes one line per notification."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream or sys.stdout

    def _write(self, notification: Notification) -> None:
        print(notification, file=self.stream)

    def start(self, description: Any) -> None:
        self._write(Notification(START, description))

    def finish(self, description: Any) -> None:
        self._write(Notification(FINISH, description))

    def fail(self, description: Any, cause: BaseException | None) -> None:
        self._write(Notification(FAIL, description, cause))

    def ignore(self, description: Any) -> None:
        self._write(Notification(IGNORE, description))
