import copy
import threading
from decimal import Decimal
from typing import Dict, Optional

import boto3
from botocore.exceptions import ClientError

from paperthrow.errors import SessionExists

SESSION_KEY = "sessionToken"


class SessionStore:
    """Document store keyed by session token.

    ``increment`` must be atomic: several events for one session can land at
    the same time and none of their counter updates may be lost.
    """

    def create(self, token: str, fields: dict) -> None:
        raise NotImplementedError

    def get(self, token: str) -> Optional[dict]:
        raise NotImplementedError

    def increment(self, token: str, field: str, delta) -> None:
        raise NotImplementedError

    def set(self, token: str, field: str, value) -> None:
        raise NotImplementedError

    def add_subrecord(self, token: str, collection: str, record: dict,
                      record_id: Optional[str] = None) -> bool:
        raise NotImplementedError


def _to_dynamo(value):
    # boto3 refuses python floats
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: _to_dynamo(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_dynamo(v) for v in value]
    return value


def _conditional_failed(err: ClientError) -> bool:
    return err.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException"


class DynamoSessionStore(SessionStore):
    """Sessions in one table, each child collection in its own table.

    Child tables use ``sessionToken`` as partition key and a per-collection
    range key (``eventId`` for events), so a session's records come back in
    order.
    """

    def __init__(self, sessions, children: Dict[str, object], sort_keys: Optional[Dict[str, str]] = None):
        self.sessions = sessions
        self.children = children
        self.sort_keys = sort_keys or {}

    @classmethod
    def from_config(cls, config, resource=None):
        d = resource or boto3.resource("dynamodb")
        return cls(
            d.Table(config.sessions_table),
            {"events": d.Table(config.events_table)},
            {"events": "eventId"},
        )

    def create(self, token, fields):
        item = _to_dynamo(dict(fields))
        item[SESSION_KEY] = token
        try:
            self.sessions.put_item(Item=item, ConditionExpression=f"attribute_not_exists({SESSION_KEY})")
        except ClientError as e:
            if _conditional_failed(e):
                raise SessionExists(token) from e
            raise

    def get(self, token):
        resp = self.sessions.get_item(Key={SESSION_KEY: token}, ConsistentRead=True)
        return resp.get("Item")

    def increment(self, token, field, delta):
        self.sessions.update_item(
            Key={SESSION_KEY: token},
            UpdateExpression="ADD #f :d",
            ConditionExpression=f"attribute_exists({SESSION_KEY})",
            ExpressionAttributeNames={"#f": field},
            ExpressionAttributeValues={":d": _to_dynamo(delta)},
        )

    def set(self, token, field, value):
        self.sessions.update_item(
            Key={SESSION_KEY: token},
            UpdateExpression="SET #f = :v",
            ExpressionAttributeNames={"#f": field},
            ExpressionAttributeValues={":v": _to_dynamo(value)},
        )

    def add_subrecord(self, token, collection, record, record_id=None):
        table = self.children[collection]
        sort_key = self.sort_keys.get(collection, "recordId")
        item = _to_dynamo(dict(record))
        item[SESSION_KEY] = token
        if record_id is None:
            table.put_item(Item=item)
            return True

        item[sort_key] = record_id
        try:
            table.put_item(Item=item, ConditionExpression=f"attribute_not_exists({sort_key})")
        except ClientError as e:
            if _conditional_failed(e):
                return False
            raise
        return True


class MemorySessionStore(SessionStore):
    """In-process store for local runs and tests. One lock guards everything."""

    def __init__(self):
        self._lock = threading.Lock()
        self.sessions: Dict[str, dict] = {}
        # (token, collection) -> {record_id: record}
        self.children: Dict[tuple, Dict[str, dict]] = {}
        self._seq = 0

    def create(self, token, fields):
        with self._lock:
            if token in self.sessions:
                raise SessionExists(token)
            item = copy.deepcopy(fields)
            item[SESSION_KEY] = token
            self.sessions[token] = item

    def get(self, token):
        with self._lock:
            item = self.sessions.get(token)
            return copy.deepcopy(item) if item is not None else None

    def increment(self, token, field, delta):
        with self._lock:
            item = self.sessions.get(token)
            if item is None:
                raise KeyError(token)
            item[field] = item.get(field, 0) + delta

    def set(self, token, field, value):
        with self._lock:
            self.sessions.setdefault(token, {SESSION_KEY: token})[field] = copy.deepcopy(value)

    def add_subrecord(self, token, collection, record, record_id=None):
        with self._lock:
            records = self.children.setdefault((token, collection), {})
            if record_id is None:
                self._seq += 1
                record_id = f"{self._seq:08d}"
            elif record_id in records:
                return False
            item = copy.deepcopy(record)
            item[SESSION_KEY] = token
            records[record_id] = item
            return True

    def subrecords(self, token, collection):
        with self._lock:
            return [copy.deepcopy(r) for r in self.children.get((token, collection), {}).values()]
