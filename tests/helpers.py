"""Scripted transports and wait stubs shared by the test modules."""

import json
import threading

from inliner.errors import TransportError
from inliner.transport.base import TransportResponse

API = "https://api.test"
CDN = "https://img.test"


def json_response(payload, status=200):
    return TransportResponse(status=status, body=json.dumps(payload).encode("utf-8"))


class FakeTransport:
    """Scripted transport.

    `routes` maps `(method, url)` to a list of responses or exceptions consumed in
    order; the last entry repeats once the list is exhausted. Unknown routes
    answer 404.
    """

    def __init__(self, routes=None):
        self.routes = {key: list(value) for key, value in (routes or {}).items()}
        self.calls = []
        self._lock = threading.Lock()

    def add(self, method, url, *responses):
        self.routes.setdefault((method, url), []).extend(responses)

    def request(
        self,
        method,
        url,
        *,
        headers=None,
        params=None,
        json_body=None,
        files=None,
        data=None,
        raise_for_status=True,
    ):
        with self._lock:
            self.calls.append(
                {
                    "method": method,
                    "url": url,
                    "headers": headers,
                    "params": params,
                    "json": json_body,
                    "files": files,
                    "data": data,
                }
            )
            queue = self.routes.get((method, url))
            if not queue:
                item = TransportResponse(status=404)
            elif len(queue) > 1:
                item = queue.pop(0)
            else:
                item = queue[0]

        if isinstance(item, Exception):
            raise item
        if raise_for_status and not 200 <= item.status < 300:
            raise TransportError(f"Inliner API error: HTTP {item.status}", status_code=item.status)
        return item

    def urls(self):
        return [call["url"] for call in self.calls]


class AsyncFakeTransport(FakeTransport):
    async def request(self, method, url, **kwargs):
        return FakeTransport.request(self, method, url, **kwargs)


class RecordingWait:
    """Poll wait stub: records waits and optionally sets a cancel event."""

    def __init__(self, cancel_after=None):
        self.calls = []
        self.cancel_after = cancel_after

    def __call__(self, seconds, cancel):
        self.calls.append(seconds)
        if self.cancel_after is not None and len(self.calls) >= self.cancel_after:
            cancel.set()
        return cancel.is_set() if cancel is not None else False
