import hashlib
import hmac
from typing import Iterable


class Signer:
    """HMAC-SHA256 over a session token.

    The signature depends on the token alone, so it proves the token was
    issued by us but says nothing about the stored session fields.
    Signatures made with any of ``previous_secrets`` still verify, which lets
    a deployment rotate ``secret`` without invalidating live sessions.
    """

    def __init__(self, secret: str, previous_secrets: Iterable[str] = ()):
        if not secret:
            raise ValueError("signing secret must not be empty")
        self._keys = [secret.encode()] + [s.encode() for s in previous_secrets if s]

    @staticmethod
    def _mac(key: bytes, token: str) -> str:
        return hmac.new(key, token.encode(), hashlib.sha256).hexdigest()

    def sign(self, token: str) -> str:
        return self._mac(self._keys[0], token)

    def verify(self, token, signature) -> bool:
        if not isinstance(token, str) or not isinstance(signature, str):
            return False
        return any(hmac.compare_digest(self._mac(k, token), signature) for k in self._keys)
