"""Mock HTTP infrastructure for notification bridges that take an ``http_client_class``."""

import httpx


class MockResponse:
    def __init__(self, *, json_data=None, text="", status_code=200):
        self._json_data = json_data
        self.text = text
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise httpx.HTTPStatusError(
                f"HTTP {self.status_code}",
                request=httpx.Request("POST", "https://example.com"),
                response=httpx.Response(self.status_code, json=self._json_data),
            )

    def json(self):
        return self._json_data


class MockHttpClient:
    """
    Replaces httpx.AsyncClient as the http_client_class.

    The bridges call self._http_client_class(timeout=...) and use the result
    as an async context manager, so __call__ returns self.
    """

    def __init__(self, response: MockResponse | None = None, error: Exception | None = None):
        self.post_calls: list[dict] = []
        self.init_kwargs: list[dict] = []
        self._post_response = response or MockResponse(json_data={})
        self._error = error

    def set_post(self, response: MockResponse) -> "MockHttpClient":
        self._post_response = response
        return self

    async def post(self, url: str, **kwargs) -> MockResponse:
        self.post_calls.append({"url": url, **kwargs})
        if self._error:
            raise self._error
        return self._post_response

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass

    def __call__(self, **kwargs):
        self.init_kwargs.append(kwargs)
        return self
