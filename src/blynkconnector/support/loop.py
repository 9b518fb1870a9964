"""
A background thread that repeatedly runs a function until it is asked to stop.
"""
import logging
import threading
import time
from typing import Callable

logger = logging.getLogger(__name__)


class AsyncLoop:
    """
    Calls `loop()` over and over on a daemon thread, between `startup()` and `shutdown()`.
    An exception from any of these is logged and the loop carries on.

    Stopping is cooperative: stop() sets the stop event and joins the thread, so
    loop() should check running() and return promptly once it is False.
    Each thread has its own stop event, so a thread that was stopped never resumes, and
    start() waits for a stopped thread that is still finishing before starting another.

    :param fn: called by the default loop()
    :param args: the positional arguments for fn
    """

    def __init__(self, fn: Callable=None, args=(), log=logger, name=None):
        self.fn = fn
        self.args = args
        self.name = name
        self.logger = log
        self.stop_event = threading.Event()
        self.background_thread = None
        self._stopped_thread = None
        self._thread_state = threading.local()
        self._lifecycle = threading.Lock()

    def start(self):
        """
        starts the thread, unless it is already running. A previous thread that has been
        stopped but has not yet exited is waited for first, unless start() is called from it.
        """
        stopped = self._stopped_thread
        if stopped is not None and stopped is not threading.current_thread():
            stopped.join()
        with self._lifecycle:
            if self.background_thread is not None:
                return
            stop_event = threading.Event()
            self.stop_event = stop_event
            self.background_thread = threading.Thread(target=self._run, args=(stop_event,), name=self.name,
                                                      daemon=True)
            self.background_thread.start()

    def exception_handler(self, e):
        self.logger.exception(e)

    def _run(self, stop_event=None):
        self._thread_state.stop_event = stop_event or self.stop_event
        self._do(self.startup)
        while self.running():
            self._do(self.loop)
        self._do(self.shutdown)
        self.logger.info("background thread exiting")

    def _do(self, step):
        try:
            time.sleep(0)
            step()
        except Exception as e:
            self.exception_handler(e)

    def startup(self):
        pass

    def loop(self):
        self.fn(*self.args)

    def shutdown(self):
        pass

    def _current_stop_event(self):
        """ the stop event of the calling loop thread. Other threads see the latest one. """
        return getattr(self._thread_state, 'stop_event', None) or self.stop_event

    def running(self):
        return not self._current_stop_event().is_set()

    def wait(self, timeout):
        """ sleeps for up to timeout seconds, waking early when the calling loop thread is stopped. """
        return self._current_stop_event().wait(timeout)

    @property
    def alive(self):
        thread = self.background_thread
        return thread is not None and thread.is_alive()

    def stop(self, timeout=None):
        """
        Signals the background thread to stop and waits for it to finish.
        Does nothing if the thread is not running. When called from the background
        thread itself, the thread exits after the current iteration.
        :param timeout: the maximum time to wait for the thread, or None to wait
            until it exits.
        """
        with self._lifecycle:
            thread = self.background_thread
            if thread is None:
                return
            self.stop_event.set()
            self.background_thread = None
            self._stopped_thread = thread
        if thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                self.logger.warning("background thread %s did not stop within %s seconds" % (thread.name, timeout))
