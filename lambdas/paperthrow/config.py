import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

DEV_SECRET = "dev_secret_spark_tier"


def _int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = (environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class Config:
    sessions_table: str = "paperthrow-sessions"
    events_table: str = "paperthrow-events"
    secret: str = DEV_SECRET
    previous_secrets: Tuple[str, ...] = ()
    # 0 disables expiry
    session_ttl_seconds: int = 0
    store_backend: str = "dynamodb"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        env = os.environ if environ is None else environ

        secret = env.get("SESSION_SECRET") or DEV_SECRET
        if secret == DEV_SECRET:
            print("[WARN] SESSION_SECRET not set, signing with the development secret")

        previous = tuple(
            s.strip() for s in (env.get("SESSION_SECRET_PREVIOUS") or "").split(",") if s.strip()
        )

        ttl = _int(env, "SESSION_TTL_SECONDS", 0)
        if ttl < 0:
            raise ValueError(f"SESSION_TTL_SECONDS must be >= 0, got {ttl}")

        backend = (env.get("STORE_BACKEND") or "dynamodb").strip().lower()
        if backend not in ("dynamodb", "memory"):
            raise ValueError(f"STORE_BACKEND must be 'dynamodb' or 'memory', got {backend!r}")

        return cls(
            sessions_table=env.get("SESSIONS_TABLE") or cls.sessions_table,
            events_table=env.get("EVENTS_TABLE") or cls.events_table,
            secret=secret,
            previous_secrets=previous,
            session_ttl_seconds=ttl,
            store_backend=backend,
        )
