import json
import math
import secrets
import time
import uuid
from decimal import Decimal

from paperthrow.errors import InvalidParameter, InvalidSession, MissingParameter
from paperthrow.wind import derive_wind

HIT_POINTS = 10
MAX_EVENT_ID_LEN = 128
MAX_DIGITS = 38
MIN_EXPONENT = -130
MAX_EXPONENT = 125


def _num(v, default=0):
    """Stored numbers come back as Decimal from DynamoDB."""
    if v is None:
        return default
    if isinstance(v, Decimal):
        return int(v) if v == v.to_integral_value() else float(v)
    return v


def _is_number(v) -> bool:
    if isinstance(v, bool) or not isinstance(v, (int, float, Decimal)):
        return False
    try:
        if not math.isfinite(v):
            return False
    except (TypeError, ValueError, OverflowError):
        return False
    return _storable(v)


def _storable(v) -> bool:
    # DynamoDB numbers: 38 significant digits, magnitude 1E-130 .. 1E+126
    d = Decimal(str(v)) if isinstance(v, float) else Decimal(v)
    if d == 0:
        return True
    return len(d.as_tuple().digits) <= MAX_DIGITS and MIN_EXPONENT <= d.adjusted() <= MAX_EXPONENT


def _short(token) -> str:
    return f"{str(token)[:8]}..."


def parse_total_score(data):
    """totalScore from a score_update payload, or None if it isn't usable."""
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data, parse_float=Decimal)
        except ValueError:
            return None
    if not isinstance(data, dict):
        return None
    total = data.get("totalScore")
    return total if _is_number(total) else None


class SessionProtocol:
    def __init__(self, store, signer, ttl_seconds: int = 0, clock=time.time):
        self.store = store
        self.signer = signer
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    def _expiry(self, now: int) -> dict:
        return {"ttl": now + self.ttl_seconds} if self.ttl_seconds > 0 else {}

    # ============ HANDSHAKE ============
    def handshake(self, version, checksum, device_id) -> dict:
        if not version or not checksum or not device_id:
            raise MissingParameter()

        token = secrets.token_hex(16)
        signature = self.signer.sign(token)
        now = int(self.clock())

        fields = {
            "createdAt": now,
            "version": version,
            "checksum": checksum,
            "deviceId": device_id,
            "signature": signature,
            "hits": 0,
            "throws": 0,
            "score": 0,
        }
        fields.update(self._expiry(now))
        self.store.create(token, fields)
        print(f"[INFO] Created session {_short(token)} device={device_id!r} version={version!r}")
        return {"sessionToken": token, "signature": signature}

    # ============ VERIFICATION GATE ============
    def verify(self, token, signature) -> dict:
        if not token or not signature or not isinstance(token, str):
            raise InvalidSession()
        if not self.signer.verify(token, signature):
            raise InvalidSession()
        session = self.store.get(token)
        if not session:
            raise InvalidSession()
        ttl = session.get("ttl")
        if ttl is not None and _num(ttl) < self.clock():
            raise InvalidSession()
        return session

    # ============ RECORD EVENT ============
    def record_event(self, token, signature, event_type, timestamp=None, data=None, event_id=None) -> bool:
        """Append an event and fold it into the session counters.

        Returns False when ``event_id`` was already recorded, in which case
        nothing is changed.
        """
        self.verify(token, signature)

        if event_id is not None and (
            not isinstance(event_id, str) or not event_id or len(event_id) > MAX_EVENT_ID_LEN
        ):
            raise InvalidParameter("Invalid eventId")

        now_ms = int(self.clock() * 1000)
        record = {
            "eventId": event_id or f"{now_ms:013d}#{uuid.uuid4().hex[:10]}",
            "eventType": event_type,
            "data": data,
            "timestamp": timestamp or now_ms,
            "createdAt": now_ms // 1000,
        }
        record.update(self._expiry(now_ms // 1000))

        if not self.store.add_subrecord(token, "events", record, record_id=event_id):
            print(f"[INFO] Duplicate event {event_id!r} for session {_short(token)}, skipping")
            return False

        if event_type == "throw":
            self.store.increment(token, "throws", 1)
        elif event_type == "basket_hit":
            # two separate atomic adds; a crash in between leaves score behind
            self.store.increment(token, "hits", 1)
            self.store.increment(token, "score", HIT_POINTS)
        elif event_type == "score_update" and data:
            total = parse_total_score(data)
            if total is None:
                print(f"[WARN] Ignoring malformed score_update for session {_short(token)}: {data!r}")
            else:
                self.store.set(token, "score", total)
        return True

    # ============ RESULTS ============
    def get_results(self, token, signature) -> dict:
        session = self.verify(token, signature)
        throws = _num(session.get("throws"))
        hits = _num(session.get("hits"))
        accuracy = hits / throws if throws > 0 else 0
        score = _num(session.get("score")) or hits * HIT_POINTS
        return {"score": score, "hits": hits, "shots": throws, "accuracy": accuracy}

    # ============ WIND ============
    def get_wind(self, token, signature) -> dict:
        self.verify(token, signature)
        wind = derive_wind(token)
        self.store.set(token, "lastWind", wind)
        return wind
