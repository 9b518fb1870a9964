"""
Pins are the addressable I/O channels of a device attached to the Blynk cloud.

A pin is identified by its number and its type. The registry holds the pins that
are watched by the synchronizer, keyed on that identity rather than on the
pin instance, so registering a second pin object for D5 has no effect.
"""
import logging
from collections import OrderedDict
from enum import Enum
from threading import Lock

logger = logging.getLogger(__name__)

PIN_ON = 255
PIN_OFF = 0


class PinType(Enum):
    ANALOG = 'A'
    DIGITAL = 'D'
    VIRTUAL = 'V'

    @property
    def prefix(self):
        """ the letter used for this pin type in request paths """
        return self.value


class Pin:
    """
    A single pin on the device, with its last known value.

    :param number: the pin number, 0-255
    :param kind: the PinType
    :param value: the cached value
    :param client: the client used to write the pin by on(), off() and write()
    """

    def __init__(self, number: int, kind: PinType, value: int=0, client=None):
        if not isinstance(kind, PinType):
            raise TypeError("pin type must be a PinType, not %r" % (kind,))
        if not 0 <= number <= 255:
            raise ValueError("invalid pin number %s" % number)
        self.number = number
        self.kind = kind
        self.value = value
        self.client = client

    @property
    def key(self):
        return self.number, self.kind

    @property
    def name(self):
        """ the pin as it appears in request paths, e.g. V5 """
        return "%s%d" % (self.kind.prefix, self.number)

    def on(self):
        return self.write(PIN_ON)

    def off(self):
        return self.write(PIN_OFF)

    def write(self, value):
        """ sets the cached value and writes it to the cloud through the owning client. """
        if self.client is None:
            raise ValueError("pin %s is not attached to a client" % self.name)
        self.value = value
        return self.client.write_pin(self.number, self.kind, value)

    def __repr__(self):
        return "Pin(%s=%s)" % (self.name, self.value)


class PinRegistry:
    """
    The set of watched pins, in the order they were added.
    Safe to use from multiple threads.
    """

    def __init__(self):
        self._pins = OrderedDict()
        self._lock = Lock()

    def add(self, pin: Pin) -> bool:
        """
        Adds the pin unless a pin with the same number and type is already registered.
        :return: True if the pin was added.
        """
        with self._lock:
            if pin.key in self._pins:
                return False
            self._pins[pin.key] = pin
        logger.debug("watching pin %s" % pin.name)
        return True

    def remove(self, pin: Pin) -> bool:
        """
        Removes the registered pin with the same number and type, if any.
        :return: True if a pin was removed.
        """
        with self._lock:
            removed = self._pins.pop(pin.key, None)
        if removed is not None:
            logger.debug("no longer watching pin %s" % pin.name)
        return removed is not None

    def get(self, number, kind):
        with self._lock:
            return self._pins.get((number, kind))

    def list(self):
        """ a snapshot of the registered pins """
        with self._lock:
            return list(self._pins.values())

    def __iter__(self):
        return iter(self.list())

    def __len__(self):
        with self._lock:
            return len(self._pins)

    def __contains__(self, pin):
        with self._lock:
            return pin.key in self._pins
