"""
Blocking HTTP requests with a uniform result.

Every response is returned as a RestResponse, whatever its status, so callers can
report the body of a failed request. TransportError is raised only when there is
no response at all.
"""
import asyncio

import aiohttp

from blynkconnector.errors import TransportError

DEFAULT_TIMEOUT = 10.0

DEFAULT_HEADERS = {
    'Content-Type': 'application/json',
    'Accept-Encoding': 'gzip, deflate',
}


class RestResponse:
    """ The status and decoded body of a response. """
    def __init__(self, status: int, body: str=''):
        self.status = status
        self.body = body

    @property
    def ok(self):
        return 200 <= self.status < 300

    def __repr__(self):
        return "RestResponse(%s, %r)" % (self.status, self.body)


class Transport:
    """ performs GET and POST requests. """

    def get(self, url) -> RestResponse:
        raise NotImplementedError

    def post(self, url, data: str) -> RestResponse:
        raise NotImplementedError


class HttpTransport(Transport):
    """
    A Transport backed by aiohttp. Each request runs to completion on a private event loop,
    so the calling thread blocks until the response arrives or the timeout elapses.
    Must not be called from a thread that is already running an event loop.

    :param timeout: total seconds allowed for each request, including reading the body.
    :param headers: extra headers sent with every request.
    """

    def __init__(self, timeout=DEFAULT_TIMEOUT, headers=None):
        self.timeout = timeout
        self.headers = dict(DEFAULT_HEADERS)
        if headers:
            self.headers.update(headers)

    def get(self, url) -> RestResponse:
        return self._request('GET', url)

    def post(self, url, data: str) -> RestResponse:
        return self._request('POST', url, data)

    def _request(self, method, url, data=None) -> RestResponse:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise TransportError("%s request failed: cannot block inside a running event loop" % method)
        try:
            return asyncio.run(self._fetch(method, url, data))
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise TransportError("%s request failed: %s" % (method, str(e) or type(e).__name__)) from e

    async def _fetch(self, method, url, data):
        payload = data.encode('utf-8') if isinstance(data, str) else data
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.request(method, url, data=payload, headers=self.headers) as response:
                content = await response.read()
                return RestResponse(response.status, content.decode("utf-8", "replace"))
