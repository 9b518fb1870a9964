import time

from blynkconnector.support.mixins import CommonEqualityMixin


class IntervalTimer(CommonEqualityMixin):
    """
    Tracks when a periodic operation is next due.

    The timer is measured from the last reset, so time spent running the operation
    is not counted against the next interval.
    """

    def __init__(self, period, started=None):
        """
        :param period: The interval in seconds.
        :param started: The time the interval was last restarted. When None, the
            timer is due immediately.
        """
        self.started = started
        self.period = period

    def reset(self, current_time=None):
        """ restarts the interval from the given time, or from now. """
        self.started = time.monotonic() if current_time is None else current_time

    def remaining(self, current_time):
        """
        Determines how long until the operation is due.
        :param current_time: The current time.
        :return: the seconds until due. Zero or negative when the timer has expired.
        """
        return 0 if self.started is None else self.period - (current_time - self.started)

    def expired(self, current_time):
        return self.remaining(current_time) <= 0
