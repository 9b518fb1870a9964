"""
Mirrors a digital pin and a virtual pin of a Blynk project.

When the digital pin changes, the virtual LED with the same number is switched on or off.
When the virtual pin changes, the on-board LED is switched to match.
Connection changes and bad responses are logged. Runs until interrupted.

    python -m blynkconnector.demo TOKEN --pin 5
"""
import argparse
import logging
import threading

from blynkconnector.api import DEFAULT_URI
from blynkconnector.client import BlynkClient
from blynkconnector.config.config import load_settings
from blynkconnector.pins import Pin, PinType

logger = logging.getLogger(__name__)

DEFAULT_PIN = 5


def build_parser():
    parser = argparse.ArgumentParser(prog='python -m blynkconnector.demo', description=__doc__.split('\n')[1])
    parser.add_argument('token', nargs='?', help="the project auth token. Read from the configuration when omitted")
    parser.add_argument('--uri', help="the Blynk server. Defaults to %s" % DEFAULT_URI)
    parser.add_argument('--pin', type=int, default=DEFAULT_PIN, help="the pin number to mirror (default %(default)s)")
    parser.add_argument('--config', help="a configuration file applied over the defaults")
    parser.add_argument('--verbose', '-v', action='store_true', help="log requests and pin changes")
    return parser


def mirror(source: Pin, target: Pin):
    """ switches the target on when the source has a value, off otherwise. """
    if source.value > 0:
        target.on()
    else:
        target.off()


def connect(client: BlynkClient, number):
    """
    Watches the digital and virtual pins with the given number, mirroring each onto the other.
    :return: the digital and virtual pins
    """
    led = client.create_pin(number, PinType.DIGITAL)
    virtual_led = client.create_pin(number, PinType.VIRTUAL)
    client.digital_pin_data_received += lambda e: mirror(e.pin, virtual_led)
    client.virtual_pin_data_received += lambda e: mirror(e.pin, led)
    client.connection_changed += lambda e: logger.info(
        "connection changed: %s -> %s" % (e.connection_type.value, e.status))
    client.bad_response += lambda e: logger.error("error -> status: %s, message: %s" % (e.status, e.body))
    return led, virtual_led


def main(argv=None, until: threading.Event=None):
    """
    :param argv: the command line arguments, without the program name
    :param until: polling stops when this is set. When None, runs until interrupted.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    settings = load_settings(args.config)
    if args.token:
        settings.token = args.token
    if args.uri:
        settings.uri = args.uri
    if not settings.token:
        parser.error("a token is required")

    client = BlynkClient.from_settings(settings)
    connect(client, args.pin)
    until = until or threading.Event()
    logger.info("mirroring D%d and V%d on %s, press Ctrl-C to stop" % (args.pin, args.pin, settings.uri))
    try:
        with client:
            until.wait()
    except KeyboardInterrupt:
        pass
    return client


if __name__ == '__main__':  # pragma no cover
    main()
