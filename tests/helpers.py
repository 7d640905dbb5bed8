"""
Shared test helpers
"""
from services.events import EventBus


class RecordingListener:
    """Collects ``(event_type, payload)`` pairs emitted on a bus"""

    def __init__(self, events: EventBus, *event_types):
        self.calls = []
        for event_type in event_types:
            events.on(event_type, self._recorder(event_type))

    def _recorder(self, event_type):
        def record(payload):
            self.calls.append((event_type, payload))
        return record

    def of_type(self, event_type):
        return [payload for recorded_type, payload in self.calls if recorded_type == event_type]
