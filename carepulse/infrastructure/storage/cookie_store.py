from typing import Dict, Optional

from fastapi import Request, Response

from ...application.ports.key_value_store import KeyValueStore


class CookieKeyValueStore(KeyValueStore):
    """Client-side storage backed by browser cookies.

    Reads come from the incoming request; writes are queued on the outgoing
    response and are also visible to later reads within the same request.
    """

    def __init__(self, request: Request, response: Optional[Response] = None, max_age: Optional[int] = None) -> None:
        self.request = request
        self.response = response
        self.max_age = max_age
        self._written: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        if key in self._written:
            return self._written[key]
        return self.request.cookies.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._written[key] = value
        if self.response is not None:
            self.response.set_cookie(key, value, max_age=self.max_age, httponly=True, samesite="lax")
