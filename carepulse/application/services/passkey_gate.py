"""Admin passkey gate.

The gate keeps casual visitors out of the admin view. It is not a security
boundary: the expected passkey is part of client-visible configuration and the
stored token is only base64, so anyone who reads the storage slot or the
front-end bundle can get in. There is no lockout or backoff on failed attempts.
"""
import base64
import binascii
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ...exceptions import MalformedCredentialToken, PasskeyRejected
from ..commands import ADMIN_PATH, HOME_PATH, NavigateTo, UICommand
from ..ports.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "accessKey"


class PasskeyVerdict(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


def encode_key(secret: str) -> str:
    return base64.b64encode(secret.encode("utf-8")).decode("ascii")


def _decode_strict(token: str) -> str:
    try:
        return base64.b64decode(token.encode("ascii"), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeError, AttributeError) as e:
        raise MalformedCredentialToken(str(e)) from e


def decode_key(token: Optional[str]) -> Optional[str]:
    """Inverse of ``encode_key``; ``None`` for absent or malformed tokens."""
    if not token:
        return None
    try:
        return _decode_strict(token)
    except MalformedCredentialToken:
        logger.warning("Stored access token could not be decoded")
        return None


def validate_passkey(candidate: Optional[str], expected: str) -> PasskeyVerdict:
    if candidate is not None and candidate == expected:
        return PasskeyVerdict.ACCEPTED
    return PasskeyVerdict.REJECTED


@dataclass
class PasskeyGate:
    expected: str
    storage: KeyValueStore
    storage_key: str = DEFAULT_STORAGE_KEY

    def submit(self, candidate: str) -> PasskeyVerdict:
        verdict = validate_passkey(candidate, self.expected)
        if verdict is PasskeyVerdict.ACCEPTED:
            self.storage.set_item(self.storage_key, encode_key(candidate))
            logger.info("Admin passkey accepted")
        else:
            logger.warning("Admin passkey rejected")
        return verdict

    def has_access(self) -> bool:
        stored = decode_key(self.storage.get_item(self.storage_key))
        return validate_passkey(stored, self.expected) is PasskeyVerdict.ACCEPTED

    def check_access(self) -> UICommand:
        if self.has_access():
            return NavigateTo(ADMIN_PATH)
        return NavigateTo(HOME_PATH)

    def require_access(self) -> None:
        if not self.has_access():
            raise PasskeyRejected()

    def close(self) -> UICommand:
        return NavigateTo(HOME_PATH)
