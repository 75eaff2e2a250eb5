from typing import Optional

from paperthrow.config import Config
from paperthrow.protocol import SessionProtocol
from paperthrow.signer import Signer
from paperthrow.store import DynamoSessionStore, MemorySessionStore

# built on first request and reused while the Lambda container stays warm
_protocol: Optional[SessionProtocol] = None


def build_protocol(config: Optional[Config] = None, resource=None) -> SessionProtocol:
    config = config or Config.from_env()
    if config.store_backend == "memory":
        store = MemorySessionStore()
    else:
        store = DynamoSessionStore.from_config(config, resource=resource)
    signer = Signer(config.secret, config.previous_secrets)
    return SessionProtocol(store, signer, ttl_seconds=config.session_ttl_seconds)


def get_protocol() -> SessionProtocol:
    global _protocol
    if _protocol is None:
        _protocol = build_protocol()
    return _protocol


def set_protocol(protocol: Optional[SessionProtocol]) -> None:
    global _protocol
    _protocol = protocol
