import logging

from blynkconnector.events import ConnectionChangeEvent, ConnectionType
from blynkconnector.support.events import EventSource

logger = logging.getLogger(__name__)


def _always_running():
    return True


class ConnectionMonitor:
    """
    Watches whether the hardware and the app are connected to the cloud.

    Each call to check() queries both connections and fires a ConnectionChangeEvent
    for each one whose status differs from the last known status. The statuses start as
    disconnected, so the first check reports any connection that is already up.
    A query that fails counts as disconnected.

    :param api: a BlynkApi
    :param events: the event source that receives ConnectionChangeEvents
    :param source: the source reported in the events
    """

    def __init__(self, api, events: EventSource, source=None, log=logger):
        self.api = api
        self.events = events
        self.source = source if source is not None else self
        self.logger = log
        self.status = {
            ConnectionType.HARDWARE: False,
            ConnectionType.APP: False,
        }
        self._queries = (
            (ConnectionType.HARDWARE, api.is_hardware_connected),
            (ConnectionType.APP, api.is_app_connected),
        )

    @property
    def hardware_connected(self):
        return self.status[ConnectionType.HARDWARE]

    @property
    def app_connected(self):
        return self.status[ConnectionType.APP]

    def check(self, running=_always_running):
        """
        Queries the connection statuses and notifies of any changes.
        :param running: called before each query and each event. The check ends
            early when it returns False.
        :return: the list of events fired
        """
        events = []
        for connection_type, query in self._queries:
            if not running():
                break
            connected = bool(query())
            if connected != self.status[connection_type] and running():
                self.status[connection_type] = connected
                self.logger.info("%s %s" % (connection_type.value, "connected" if connected else "disconnected"))
                event = ConnectionChangeEvent(self.source, connection_type, connected)
                events.append(event)
                self.events.fire(event)
        return events
