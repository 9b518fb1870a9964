from unittest import TestCase
from unittest.mock import Mock

from hamcrest import assert_that, is_, empty, contains_exactly

from blynkconnector.events import ConnectionChangeEvent, ConnectionType
from blynkconnector.monitor import ConnectionMonitor
from blynkconnector.support.events import EventSource


class ConnectionMonitorTest(TestCase):

    def setUp(self):
        self.api = Mock()
        self.api.is_hardware_connected.return_value = False
        self.api.is_app_connected.return_value = False
        self.listener = Mock()
        self.events = EventSource().add(self.listener)
        self.logger = Mock()
        self.sut = ConnectionMonitor(self.api, self.events, log=self.logger)

    def test_initially_disconnected(self):
        assert_that(self.sut.hardware_connected, is_(False))
        assert_that(self.sut.app_connected, is_(False))
        assert_that(self.sut.source, is_(self.sut))

    def test_no_change_no_event(self):
        assert_that(self.sut.check(), is_(empty()))
        self.listener.assert_not_called()

    def test_hardware_edges(self):
        statuses = [False, False, True, True, False]
        fired = []
        for status in statuses:
            self.api.is_hardware_connected.return_value = status
            fired.extend(self.sut.check())
        assert_that(fired, contains_exactly(
            ConnectionChangeEvent(self.sut, ConnectionType.HARDWARE, True),
            ConnectionChangeEvent(self.sut, ConnectionType.HARDWARE, False)))
        assert_that(self.listener.call_count, is_(2))

    def test_app_edges(self):
        self.api.is_app_connected.return_value = True
        self.sut.check()
        self.sut.check()
        self.listener.assert_called_once_with(ConnectionChangeEvent(self.sut, ConnectionType.APP, True))
        assert_that(self.sut.app_connected, is_(True))

    def test_hardware_reported_before_app(self):
        self.api.is_hardware_connected.return_value = True
        self.api.is_app_connected.return_value = True
        events = self.sut.check()
        assert_that([e.connection_type for e in events], is_([ConnectionType.HARDWARE, ConnectionType.APP]))
        assert_that(self.logger.info.call_count, is_(2))

    def test_failed_query_counts_as_disconnected(self):
        self.api.is_hardware_connected.return_value = True
        self.sut.check()
        self.api.is_hardware_connected.return_value = False     # the api returns False on failure
        events = self.sut.check()
        assert_that(events, contains_exactly(ConnectionChangeEvent(self.sut, ConnectionType.HARDWARE, False)))

    def test_each_check_queries_once(self):
        self.sut.check()
        assert_that(self.api.is_hardware_connected.call_count, is_(1))
        assert_that(self.api.is_app_connected.call_count, is_(1))

    def test_stopped_check_makes_no_queries(self):
        self.sut.check(running=lambda: False)
        self.api.is_hardware_connected.assert_not_called()
        self.api.is_app_connected.assert_not_called()

    def test_stop_between_queries(self):
        running = Mock(side_effect=[True, True, False])
        self.api.is_hardware_connected.return_value = True
        self.api.is_app_connected.return_value = True
        events = self.sut.check(running)
        assert_that(len(events), is_(1))
        self.api.is_app_connected.assert_not_called()

    def test_no_event_when_stopped_during_query(self):
        running = Mock(side_effect=[True, False, False])
        self.api.is_hardware_connected.return_value = True
        assert_that(self.sut.check(running), is_(empty()))
        assert_that(self.sut.hardware_connected, is_(False))
        self.listener.assert_not_called()

    def test_custom_source(self):
        owner = object()
        sut = ConnectionMonitor(self.api, self.events, owner)
        self.api.is_app_connected.return_value = True
        event = sut.check()[0]
        assert_that(event.source, is_(owner))
