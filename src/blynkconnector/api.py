"""
Typed operations on the Blynk cloud HTTP API.

Every operation issues a single request through the transport. Failures never escape
to the caller: a non-success status is fired on `bad_response`, a transport or payload
failure is fired on `request_failed`, and the operation returns its failure value
(False or None).
"""
import json
import logging

from blynkconnector.errors import BadResponseError, PayloadError, TransportError
from blynkconnector.events import BadResponseEvent, RequestFailedEvent
from blynkconnector.pins import PinType
from blynkconnector.project import Project
from blynkconnector.support.events import EventSource
from blynkconnector.transport import HttpTransport, RestResponse, Transport

logger = logging.getLogger(__name__)

DEFAULT_URI = 'http://blynk-cloud.com'

# the notify endpoint rejects longer messages
MAX_NOTIFICATION_BYTES = 255


def parse_bool(body: str) -> bool:
    """
    >>> parse_bool(' True ')
    True
    >>> parse_bool('false')
    False
    """
    value = body.strip().lower()
    if value == 'true':
        return True
    if value == 'false':
        return False
    raise PayloadError("expected true or false, got %r" % body)


def parse_pin_value(body: str) -> int:
    """
    The pin value arrives as a JSON array of strings, the first being the value.
    >>> parse_pin_value('["12"]')
    12
    """
    try:
        values = json.loads(body)
        return int(values[0])
    except (ValueError, TypeError, IndexError, KeyError) as e:
        raise PayloadError("expected a pin value array, got %r" % body) from e


def parse_project(body: str) -> Project:
    try:
        data = json.loads(body)
    except ValueError as e:
        raise PayloadError("project is not valid JSON: %s" % e) from e
    return Project.from_json(data)


class BlynkApi:
    """
    The Blynk HTTP API for a single project.

    :param token: the project auth token
    :param uri: the base URI of the Blynk server
    :param transport: performs the requests. Defaults to an HttpTransport
    :param bad_response: event source fired with a BadResponseEvent for non-success responses
    :param request_failed: event source fired with a RequestFailedEvent for failed requests
    """

    def __init__(self, token, uri=DEFAULT_URI, transport: Transport=None,
                 bad_response: EventSource=None, request_failed: EventSource=None, source=None):
        self.token = token
        self.uri = uri.rstrip('/')
        self.transport = transport if transport is not None else HttpTransport()
        self.bad_response = bad_response if bad_response is not None else EventSource()
        self.request_failed = request_failed if request_failed is not None else EventSource()
        self.source = source if source is not None else self

    def url(self, path):
        return "%s/%s/%s" % (self.uri, self.token, path)

    def is_hardware_connected(self) -> bool:
        return self._call('isHardwareConnected', self._get, parse_bool, False)

    def is_app_connected(self) -> bool:
        return self._call('isAppConnected', self._get, parse_bool, False)

    def get_project_structure(self):
        """ :return: the Project, or None if it could not be fetched """
        return self._call('project', self._get, parse_project, None)

    def read_pin(self, number, kind: PinType):
        """ :return: the pin value as an int, or None if it could not be read """
        path = "get/%s%d" % (kind.prefix, number)
        return self._call(path, self._get, parse_pin_value, None)

    def read_digital_pin(self, number):
        return self.read_pin(number, PinType.DIGITAL)

    def read_virtual_pin(self, number):
        return self.read_pin(number, PinType.VIRTUAL)

    def write_pin(self, number, kind: PinType, value=0) -> bool:
        path = "update/%s%d?value=%s" % (kind.prefix, number, value)
        return self._call(path, self._get, lambda body: True, False)

    def write_digital_pin(self, number, value=0) -> bool:
        return self.write_pin(number, PinType.DIGITAL, value)

    def write_virtual_pin(self, number, value=0) -> bool:
        return self.write_pin(number, PinType.VIRTUAL, value)

    def notify(self, body: str) -> bool:
        """
        Sends a push notification to the project's apps.
        :param body: the message, at most 255 bytes once encoded as UTF-8.
        :return: True if the server accepted the notification
        """
        if len(body.encode('utf-8')) > MAX_NOTIFICATION_BYTES:
            logger.warning("notification not sent: longer than %d bytes" % MAX_NOTIFICATION_BYTES)
            return False
        data = json.dumps({'body': body})
        return self._call('notify', lambda url: self._post(url, data), lambda body: True, False)

    def _get(self, url) -> RestResponse:
        return self.transport.get(url)

    def _post(self, url, data) -> RestResponse:
        return self.transport.post(url, data)

    def _call(self, path, request, parse, failed):
        """
        Issues a request and parses the response.
        :param path: the path below the token
        :param request: a callable that takes the url and returns a RestResponse
        :param parse: converts the response body to the result
        :param failed: the result when the request fails
        """
        url = self.url(path)
        logger.debug("request %s" % path)
        try:
            response = request(url)
            if not response.ok:
                raise BadResponseError(response.status, response.body, url)
            return parse(response.body)
        except BadResponseError as e:
            logger.warning("bad response %s from %s: %s" % (e.status, path, e.body))
            self.bad_response.fire(BadResponseEvent(self.source, e.status, e.body, url))
        except (TransportError, PayloadError) as e:
            logger.error("request %s failed: %s" % (path, e))
            self.request_failed.fire(RequestFailedEvent(self.source, path, e))
        return failed
