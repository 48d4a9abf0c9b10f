from step_notifier.notify.notifier import NotificationSink, UnitNotifier
from step_notifier.notify.sinks import MulticastSink, Notification, RecordingSink, StreamSink

__all__ = [
    "MulticastSink",
    "Notification",
    "NotificationSink",
    "RecordingSink",
    "StreamSink",
    "UnitNotifier",
]
