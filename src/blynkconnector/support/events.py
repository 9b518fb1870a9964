import logging
from threading import Lock

logger = logging.getLogger(__name__)


class EventSource(object):
    """
    Multicasts events to registered handlers.

    Handlers are called synchronously, in the order they were added, on the thread
    that fires the event. An exception raised by a handler propagates to the caller
    and the remaining handlers are not invoked.
    """

    def __init__(self):
        self._handlers = []
        self._lock = Lock()

    def __iadd__(self, handler):
        return self.add(handler)

    def __isub__(self, handler):
        return self.remove(handler)

    def add(self, handler):
        with self._lock:
            self._handlers.append(handler)
        return self

    def remove(self, handler):
        with self._lock:
            if handler in self._handlers:
                self._handlers.remove(handler)
        return self

    def handlers(self):
        with self._lock:
            return tuple(self._handlers)

    def fire(self, *args, **kwargs):
        self._fire(*args, **kwargs)

    def fire_all(self, events):
        self._fire_all(events)

    def _fire_all(self, events):
        for e in events:
            self._fire(e)

    def _fire(self, *args, **kwargs):
        for handler in self.handlers():
            self._call(handler, *args, **kwargs)

    def _call(self, handler, *args, **kwargs):
        handler(*args, **kwargs)


class GuardedEventSource(EventSource):
    """
    An event source that isolates its handlers from each other.
    A handler that raises is logged and the next handler is still called.
    """
    def __init__(self, name=None, log=logger):
        super().__init__()
        self.name = name
        self.logger = log

    def _call(self, handler, *args, **kwargs):
        try:
            handler(*args, **kwargs)
        except Exception as e:
            self.logger.exception("handler %r for %s failed: %s" % (handler, self.name or 'event', e))
