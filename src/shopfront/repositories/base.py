from abc import ABC, abstractmethod
from contextlib import contextmanager
from copy import deepcopy
from decimal import Decimal, DecimalException
from threading import Lock
from typing import TypeVar, Generic, Optional, List, Any, Dict
import logging

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError

from shopfront.core.exceptions import ConflictError, NotFoundError, StoreError, ValidationError

T = TypeVar('T')

logger = logging.getLogger(__name__)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


def to_store_value(value: Any) -> Any:
    """Convert plain JSON values into values the DynamoDB serializer accepts (floats become Decimal)"""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_store_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_store_value(v) for v in value]
    return value


def to_plain_value(value: Any) -> Any:
    """Convert deserialized store values back into plain JSON values"""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: to_plain_value(v) for k, v in value.items()}
    if isinstance(value, (list, set, frozenset)):
        return [to_plain_value(v) for v in value]
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    return value


class BaseRepository(ABC, Generic[T]):
    """
    Narrow store-agnostic interface every entity repository exposes.
    Flows depend on these methods only, never on a concrete store client.
    """

    @abstractmethod
    def create_if_absent(self, entity: T) -> None:
        """Persist entity; raises ConflictError if its id already exists"""
        pass

    @abstractmethod
    def get_by_id(self, entity_id: str) -> Optional[T]:
        """Get entity by ID, or None when absent"""
        pass

    def exists(self, entity_id: str) -> bool:
        return self.get_by_id(entity_id) is not None

    @property
    @abstractmethod
    def entity_name(self) -> str:
        """Human-readable entity name for error messages"""
        pass


class DynamoTable:
    """
    Thin wrapper over a low-level DynamoDB client bound to one table.

    Items are marshalled with boto3's TypeSerializer/TypeDeserializer so
    callers only ever see plain JSON values. botocore failures are
    translated to ConflictError/StoreError here and nowhere else.
    """

    _serializer = TypeSerializer()
    _deserializer = TypeDeserializer()

    def __init__(self, client, table_name: str, entity_name: str = "Item"):
        self.client = client
        self.table_name = table_name
        self.entity_name = entity_name

    def marshall(self, item: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return {k: self._serializer.serialize(to_store_value(v)) for k, v in item.items()}
        except (DecimalException, TypeError) as e:
            # Numbers outside DynamoDB's 38-digit range, or values with no attribute type
            logger.warning(f"Unstorable {self.entity_name} attribute: {e.__class__.__name__}")
            raise ValidationError("Invalid body")

    def unmarshall(self, item: Dict[str, Any]) -> Dict[str, Any]:
        return {k: to_plain_value(self._deserializer.deserialize(v)) for k, v in item.items()}

    @contextmanager
    def store_call(self, operation: str):
        """Translate botocore errors raised inside the block"""
        try:
            yield
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code == CONDITIONAL_CHECK_FAILED:
                logger.warning(f"Conditional {operation} rejected on {self.table_name}")
                raise ConflictError(f"{self.entity_name} already exists")
            logger.error(f"{operation} on {self.table_name} failed: {code}: {str(e)}")
            raise StoreError(f"{operation} on {self.table_name} failed: {code}", operation)
        except BotoCoreError as e:
            logger.error(f"{operation} on {self.table_name} failed: {str(e)}")
            raise StoreError(f"{operation} on {self.table_name} failed", operation)

    def put_if_absent(self, item: Dict[str, Any]) -> None:
        with self.store_call("PutItem"):
            self.client.put_item(
                TableName=self.table_name,
                Item=self.marshall(item),
                ConditionExpression="attribute_not_exists(id)",
            )

    def get(self, item_id: str) -> Optional[Dict[str, Any]]:
        with self.store_call("GetItem"):
            response = self.client.get_item(
                TableName=self.table_name,
                Key={"id": {"S": item_id}},
                ConsistentRead=True,
            )
        item = response.get("Item")
        return self.unmarshall(item) if item else None

    def query_index(self, index_name: str, attribute: str, value: str) -> List[Dict[str, Any]]:
        """Equality lookup on a secondary index whose partition key is `attribute`"""
        with self.store_call("Query"):
            response = self.client.query(
                TableName=self.table_name,
                IndexName=index_name,
                KeyConditionExpression="#key = :value",
                ExpressionAttributeNames={"#key": attribute},
                ExpressionAttributeValues={":value": {"S": value}},
            )
        return [self.unmarshall(item) for item in response.get("Items", [])]

    def scan_all(self) -> List[Dict[str, Any]]:
        """Full table scan, following LastEvaluatedKey until exhausted"""
        items: List[Dict[str, Any]] = []
        params: Dict[str, Any] = {"TableName": self.table_name}
        while True:
            with self.store_call("Scan"):
                response = self.client.scan(**params)
            items.extend(self.unmarshall(item) for item in response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            params["ExclusiveStartKey"] = last_key

    def set_attribute(self, item_id: str, attribute: str, value: Any) -> None:
        """Set one attribute on an existing item; NotFoundError if the item is absent"""
        try:
            with self.store_call("UpdateItem"):
                self.client.update_item(
                    TableName=self.table_name,
                    Key={"id": {"S": item_id}},
                    UpdateExpression="SET #attr = :value",
                    ConditionExpression="attribute_exists(id)",
                    ExpressionAttributeNames={"#attr": attribute},
                    ExpressionAttributeValues={":value": self._serializer.serialize(to_store_value(value))},
                )
        except ConflictError:
            raise NotFoundError(self.entity_name, item_id)


class InMemoryTable:
    """
    Process-local stand-in for a DynamoDB table, keyed by `id`.

    Items are deep-copied on the way in and out so callers cannot mutate
    stored state, mirroring a real remote store.
    """

    def __init__(self, entity_name: str = "Item"):
        self.entity_name = entity_name
        self._items: Dict[str, Dict[str, Any]] = {}
        self._lock = Lock()

    def put_if_absent(self, item: Dict[str, Any]) -> None:
        with self._lock:
            if item["id"] in self._items:
                logger.warning(f"Conditional put rejected for {self.entity_name} {item['id']}")
                raise ConflictError(f"{self.entity_name} already exists")
            self._items[item["id"]] = deepcopy(item)

    def get(self, item_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            item = self._items.get(item_id)
            return deepcopy(item) if item is not None else None

    def find_by(self, attribute: str, value: Any) -> List[Dict[str, Any]]:
        with self._lock:
            return [deepcopy(item) for item in self._items.values() if item.get(attribute) == value]

    def scan_all(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [deepcopy(item) for item in self._items.values()]

    def set_attribute(self, item_id: str, attribute: str, value: Any) -> None:
        with self._lock:
            if item_id not in self._items:
                raise NotFoundError(self.entity_name, item_id)
            self._items[item_id][attribute] = deepcopy(value)

    def __len__(self) -> int:
        return len(self._items)
