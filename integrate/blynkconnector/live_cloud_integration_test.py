import os
import unittest

import timeout_decorator
from hamcrest import assert_that, is_, is_not, none, instance_of, empty

from blynkconnector.client import BlynkClient
from blynkconnector.pins import PinType
from blynkconnector.project import Project
from blynkconnector.support.loop_test import debug_timeout, wait_until

token = os.environ.get('BLYNK_TOKEN')
uri = os.environ.get('BLYNK_URI', 'http://blynk-cloud.com')
pin = int(os.environ.get('BLYNK_PIN', '5'))


@unittest.skipUnless(token, "BLYNK_TOKEN not defined")
class LiveCloudIntegrationTest(unittest.TestCase):
    """ runs against a real project. The project should have a widget on the virtual pin BLYNK_PIN. """

    def setUp(self):
        self.client = BlynkClient(token, uri, connection_check_interval=0.5, pin_sync_interval=0.5)
        self.failures = []
        self.client.bad_response += self.failures.append
        self.client.request_failed += self.failures.append

    def tearDown(self):
        self.client.stop()

    def test_connection_status(self):
        assert_that(self.client.is_hardware_connected(), instance_of(bool))
        assert_that(self.client.is_app_connected(), instance_of(bool))
        assert_that(self.failures, is_(empty()))

    def test_project_structure(self):
        project = self.client.get_project_structure()
        assert_that(project, instance_of(Project))
        assert_that(project.widgets_for_pin(pin, PinType.VIRTUAL), is_not(empty()))

    @timeout_decorator.timeout(debug_timeout(20))
    def test_write_is_seen_by_polling(self):
        assert_that(self.client.write_virtual_pin(pin, 0), is_(True))
        led = self.client.create_pin(pin, PinType.VIRTUAL)
        events = []
        self.client.virtual_pin_data_received += events.append
        with self.client:
            assert_that(led.on(), is_(True))
            led.value = 0
            wait_until(lambda: events, interval=0.1)
        assert_that(events[0].pin.value, is_(255))
        assert_that(self.client.read_virtual_pin(pin), is_not(none()))

    def test_bad_token(self):
        client = BlynkClient('not-a-token', uri)
        responses = []
        client.bad_response += responses.append
        assert_that(client.is_hardware_connected(), is_(False))
        assert_that(responses[0].status, is_not(200))


if __name__ == '__main__':  # pragma no cover
    unittest.main()
