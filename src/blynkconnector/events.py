"""
Events fired by the client. Each event carries the object that fired it as `source`.
"""
from enum import Enum

from blynkconnector.support.mixins import CommonEqualityMixin, StringerMixin


class ConnectionType(Enum):
    APP = 'app'
    HARDWARE = 'hardware'


class BlynkEvent(CommonEqualityMixin, StringerMixin):
    """ base class for client events. """
    def __init__(self, source):
        self.source = source


class BadResponseEvent(BlynkEvent):
    """ The server answered a request with a non-success status. """
    def __init__(self, source, status, body, url=None):
        super().__init__(source)
        self.status = status
        self.body = body
        self.url = url


class RequestFailedEvent(BlynkEvent):
    """
    A request failed without a usable response: the transport failed or the
    response body could not be parsed.
    """
    def __init__(self, source, operation, error):
        super().__init__(source)
        self.operation = operation
        self.error = error


class ConnectionChangeEvent(BlynkEvent):
    """ The hardware or the app connected to or disconnected from the cloud. """
    def __init__(self, source, connection_type: ConnectionType, status: bool):
        super().__init__(source)
        self.connection_type = connection_type
        self.status = status


class PinDataReceivedEvent(BlynkEvent):
    """ A watched pin changed value. The pin holds the new value. """
    def __init__(self, source, pin):
        super().__init__(source)
        self.pin = pin


class DigitalPinDataReceivedEvent(PinDataReceivedEvent):
    """ A watched digital pin changed value. """


class VirtualPinDataReceivedEvent(PinDataReceivedEvent):
    """ A watched virtual pin changed value. """
