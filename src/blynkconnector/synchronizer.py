"""
Keeps the cached values of watched pins in step with the cloud.

Each sync() reads every watched digital and virtual pin, in registry order. When a value
differs from the cached one, the pin is updated and an event is fired before the next pin
is read. Analog pins are never polled. A pin that cannot be read keeps its cached value
until a later sync.
"""
import logging

from blynkconnector.events import DigitalPinDataReceivedEvent, VirtualPinDataReceivedEvent
from blynkconnector.pins import Pin, PinRegistry, PinType
from blynkconnector.support.events import EventSource

logger = logging.getLogger(__name__)


def _always_running():
    return True


class PinSynchronizer:
    """
    :param api: a BlynkApi used to read the pins
    :param registry: the watched pins
    :param digital_events: receives a DigitalPinDataReceivedEvent when a digital pin changes
    :param virtual_events: receives a VirtualPinDataReceivedEvent when a virtual pin changes
    :param source: the source reported in the events
    """
    event_types = {
        PinType.DIGITAL: DigitalPinDataReceivedEvent,
        PinType.VIRTUAL: VirtualPinDataReceivedEvent,
    }

    def __init__(self, api, registry: PinRegistry, digital_events: EventSource, virtual_events: EventSource,
                 source=None):
        self.api = api
        self.registry = registry
        self.source = source if source is not None else self
        self.listeners = {
            PinType.DIGITAL: digital_events,
            PinType.VIRTUAL: virtual_events,
        }

    def _is_polled(self, pin: Pin):
        return pin.kind in self.event_types

    def _fetch(self, pin: Pin):
        """ :return: the current value of the pin, or None if it could not be read """
        return self.api.read_pin(pin.number, pin.kind)

    def _changed(self, pin: Pin, value):
        pin.value = value
        logger.debug("pin %s changed to %s" % (pin.name, value))
        return self.event_types[pin.kind](self.source, pin)

    def sync(self, running=_always_running):
        """
        Reads the watched pins and fires an event for each one that changed.
        :param running: called before each read and each event. The sync ends
            early when it returns False.
        :return: the list of events fired
        """
        events = []
        for pin in self.registry.list():
            if not self._is_polled(pin):
                continue
            if not running():
                break
            value = self._fetch(pin)
            if value is None or value == pin.value:
                continue
            if not running():
                break
            event = self._changed(pin, value)
            events.append(event)
            self.listeners[pin.kind].fire(event)
        return events
