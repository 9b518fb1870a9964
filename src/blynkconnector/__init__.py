"""


Blynk cloud connector

Keeps a local view of the pins of a Blynk project in step with the Blynk cloud, by polling
its HTTP API, and notifies listeners as things change.

- Pin: a digital, virtual or analog pin, with its last known value. A pin attached to a client
  can be written with on(), off() and write().
- PinRegistry: the pins being watched, in the order they were added.
- BlynkApi: one typed call per HTTP endpoint. Failures never escape: non-success responses are
  posted as BadResponseEvent, failed requests as RequestFailedEvent, and the call returns
  False or None.
- ConnectionMonitor: queries whether the hardware and the app are connected, posting
  a ConnectionChangeEvent on each edge.
- PinSynchronizer: reads each watched digital and virtual pin, posting
  DigitalPinDataReceivedEvent/VirtualPinDataReceivedEvent when the value changes.
- BlynkClient: ties these together. A PollingLoop on a background thread runs the monitor and the
  synchronizer, each on its own interval.


## Threading

Events are fired on the polling thread. Handlers should return promptly, since the next check
waits for them. A handler that raises is logged and the remaining handlers still run.

The registry may be changed from any thread. Pins added while a sync is running are read on the
next sync.

stop() waits for the polling thread to exit. A request in flight is bounded by the HTTP timeout.


## Configuration

See config/config.py. Settings come from the packaged blynk.default.cfg, overridden by ~/blynk.cfg
and then by an optional local file.
"""
