class BlynkError(Exception):
    """ Base class for errors communicating with the Blynk cloud. """


class TransportError(BlynkError):
    """ The request could not be completed, so no HTTP response is available. """


class BadResponseError(BlynkError):
    """ The server answered with a status outside the success range. """
    def __init__(self, status, body, url=None):
        super().__init__("bad response %s from %s: %s" % (status, url, body))
        self.status = status
        self.body = body
        self.url = url


class PayloadError(BlynkError):
    """ A successful response carried a body that could not be understood. """


class ProjectFormatError(PayloadError):
    """ The project document does not have the expected structure. """
