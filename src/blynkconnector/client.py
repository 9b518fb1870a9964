"""
The Blynk client: watched pins, cloud polling and event notification in one place.

A client owns a background PollingLoop. While it runs, the connection status of the
hardware and the app is checked every `connection_check_interval` seconds and the watched
pins are read every `pin_sync_interval` seconds. Changes are reported through the client's
event sources, on the polling thread.

    client = BlynkClient(token)
    client.virtual_pin_data_received += lambda e: print(e.pin)
    client.create_pin(5, PinType.VIRTUAL)
    with client:
        ...
"""
import logging
import time

from blynkconnector.api import BlynkApi, DEFAULT_URI
from blynkconnector.monitor import ConnectionMonitor
from blynkconnector.pins import Pin, PinRegistry, PinType
from blynkconnector.support.events import GuardedEventSource
from blynkconnector.support.loop import AsyncLoop
from blynkconnector.support.timers import IntervalTimer
from blynkconnector.synchronizer import PinSynchronizer
from blynkconnector.transport import HttpTransport, Transport

logger = logging.getLogger(__name__)

DEFAULT_CONNECTION_CHECK_INTERVAL = 15.0
DEFAULT_PIN_SYNC_INTERVAL = 2.0
DEFAULT_TICK = 0.1


class PollingLoop(AsyncLoop):
    """
    Runs the connection checks and pin syncs on their own intervals.
    Both timers start with the loop, so nothing is polled until an interval has passed.
    """

    def __init__(self, monitor: ConnectionMonitor, synchronizer: PinSynchronizer,
                 connection_check_interval=DEFAULT_CONNECTION_CHECK_INTERVAL,
                 pin_sync_interval=DEFAULT_PIN_SYNC_INTERVAL, tick=DEFAULT_TICK, log=logger):
        super().__init__(log=log, name='blynk-polling')
        self.monitor = monitor
        self.synchronizer = synchronizer
        self.connection_timer = IntervalTimer(connection_check_interval)
        self.sync_timer = IntervalTimer(pin_sync_interval)
        self.tick = tick

    def startup(self):
        now = time.monotonic()
        self.connection_timer.reset(now)
        self.sync_timer.reset(now)
        self.logger.info("polling started")

    def loop(self):
        if self.running() and self.connection_timer.expired(time.monotonic()):
            try:
                self.monitor.check(self.running)
            finally:
                self.connection_timer.reset()
        if self.running() and self.sync_timer.expired(time.monotonic()):
            try:
                self.synchronizer.sync(self.running)
            finally:
                self.sync_timer.reset()
        self.wait(self.tick)

    def shutdown(self):
        self.logger.info("polling stopped")


class BlynkClient:
    """
    A client for one Blynk project.

    :param token: the project auth token
    :param uri: the base URI of the Blynk server
    :param transport: performs the HTTP requests. Defaults to an HttpTransport
    :param connection_check_interval: seconds between connection checks
    :param pin_sync_interval: seconds between reads of the watched pins
    :param tick: seconds between checks of the two intervals

    Event sources, each called with a single event:

    - bad_response: BadResponseEvent, for each non-success response
    - request_failed: RequestFailedEvent, for each request that got no usable response
    - connection_changed: ConnectionChangeEvent, when the hardware or app connects or disconnects
    - digital_pin_data_received: DigitalPinDataReceivedEvent, when a watched digital pin changes
    - virtual_pin_data_received: VirtualPinDataReceivedEvent, when a watched virtual pin changes
    """

    def __init__(self, token, uri=DEFAULT_URI, transport: Transport=None,
                 connection_check_interval=DEFAULT_CONNECTION_CHECK_INTERVAL,
                 pin_sync_interval=DEFAULT_PIN_SYNC_INTERVAL, tick=DEFAULT_TICK):
        self.token = token
        self.uri = uri
        self.bad_response = GuardedEventSource('bad_response')
        self.request_failed = GuardedEventSource('request_failed')
        self.connection_changed = GuardedEventSource('connection_changed')
        self.digital_pin_data_received = GuardedEventSource('digital_pin_data_received')
        self.virtual_pin_data_received = GuardedEventSource('virtual_pin_data_received')
        self.registry = PinRegistry()
        self.api = BlynkApi(token, uri, transport, self.bad_response, self.request_failed, source=self)
        self.monitor = ConnectionMonitor(self.api, self.connection_changed, source=self)
        self.synchronizer = PinSynchronizer(self.api, self.registry, self.digital_pin_data_received,
                                            self.virtual_pin_data_received, source=self)
        self.polling = PollingLoop(self.monitor, self.synchronizer, connection_check_interval,
                                   pin_sync_interval, tick)

    @classmethod
    def from_settings(cls, settings, transport: Transport=None):
        """
        Builds a client from ClientSettings and watches the pins they list.
        """
        if transport is None:
            transport = HttpTransport(settings.timeout)
        client = cls(settings.token, settings.uri, transport, settings.connection_check_interval,
                     settings.pin_sync_interval, settings.tick)
        for number in settings.digital:
            client.create_pin(number, PinType.DIGITAL)
        for number in settings.virtual:
            client.create_pin(number, PinType.VIRTUAL)
        return client

    @property
    def hardware_connected(self):
        return self.monitor.hardware_connected

    @property
    def app_connected(self):
        return self.monitor.app_connected

    # pins

    def add_pin(self, pin: Pin) -> bool:
        """
        Watches a pin. The pin writes through this client once added.
        :return: True if the pin was added, False if a pin with the same number and type is already watched.
        """
        added = self.registry.add(pin)
        if added:
            pin.client = self
        return added

    def remove_pin(self, pin: Pin) -> bool:
        return self.registry.remove(pin)

    def create_pin(self, number, kind: PinType, value=0) -> Pin:
        """
        Watches a new pin, or returns the pin already watched with the same number and type.
        """
        pin = Pin(number, kind, value)
        if not self.add_pin(pin):
            pin = self.registry.get(number, kind)
        return pin

    @property
    def pins(self):
        return self.registry.list()

    # cloud api

    def is_hardware_connected(self) -> bool:
        return self.api.is_hardware_connected()

    def is_app_connected(self) -> bool:
        return self.api.is_app_connected()

    def get_project_structure(self):
        return self.api.get_project_structure()

    def read_pin(self, number, kind: PinType):
        return self.api.read_pin(number, kind)

    def read_digital_pin(self, number):
        return self.api.read_digital_pin(number)

    def read_virtual_pin(self, number):
        return self.api.read_virtual_pin(number)

    def write_pin(self, number, kind: PinType, value=0) -> bool:
        return self.api.write_pin(number, kind, value)

    def write_digital_pin(self, number, value=0) -> bool:
        return self.api.write_digital_pin(number, value)

    def write_virtual_pin(self, number, value=0) -> bool:
        return self.api.write_virtual_pin(number, value)

    def notify(self, body) -> bool:
        return self.api.notify(body)

    # lifecycle

    def start(self):
        """ starts polling. Does nothing if already started. """
        self.polling.start()

    def stop(self, timeout=None):
        """
        Stops polling and waits for the polling thread to exit.
        Once this returns, no further requests are made and no further events are fired.
        Does nothing if not started.

        When called from an event handler, this returns at once and the thread exits after
        the current event has been delivered to the rest of its handlers.
        A later start() waits for a stopped thread that is still finishing.
        """
        self.polling.stop(timeout)

    @property
    def running(self):
        return self.polling.alive

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
