"""
DynamoDB access for the tracker table.

All cycle data lives in one table. Items of a user share the partition key
USER#{user_id}; sort keys put each cycle's metadata item directly before its
entries so a single begins_with query reads a whole cycle.
"""
import os
from decimal import Decimal
from typing import Dict, List, Optional, Any
import boto3
from boto3.dynamodb.conditions import Key

_dynamo_instance = None

def get_dynamo() -> 'DynamoDBClient':
    """
    Shared DynamoDBClient for the table named by TRACKER_TABLE_NAME.

    The client is created on first use and reused for the life of the
    Lambda container. Repositories call this instead of building clients.

    Raises:
        EnvironmentError: If TRACKER_TABLE_NAME is not set
    """
    global _dynamo_instance
    if _dynamo_instance is None:
        table_name = os.environ.get('TRACKER_TABLE_NAME')
        if not table_name:
            raise EnvironmentError(
                "TRACKER_TABLE_NAME environment variable not set. "
                "It must name the DynamoDB table holding cycle data."
            )
        _dynamo_instance = DynamoDBClient(table_name)
    return _dynamo_instance

class DynamoDBClient:
    """Thin wrapper over a boto3 Table converting numbers in both directions."""

    def __init__(self, table_name: str):
        self.dynamodb = boto3.resource('dynamodb')
        self.table = self.dynamodb.Table(table_name)

    def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """Write item, replacing any item with the same keys."""
        return self.table.put_item(Item=to_dynamo(item))

    def get_item(self, key: Dict[str, str]) -> Optional[Dict[str, Any]]:
        """Read the item at key, None when absent."""
        item = self.table.get_item(Key=key).get('Item')
        return from_dynamo(item) if item is not None else None

    def query_items(
        self,
        partition_key: str,
        partition_value: str,
        sort_key_prefix: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        All items of a partition, optionally restricted to a sort key prefix.

        Pages are followed through LastEvaluatedKey; a user's full history
        can exceed the 1 MB query page.

        Args:
            partition_key: Partition key attribute name
            partition_value: Partition to read
            sort_key_prefix: Only return items whose SK starts with this

        Returns:
            Items in sort key order
        """
        condition = Key(partition_key).eq(partition_value)
        if sort_key_prefix:
            condition = condition & Key('SK').begins_with(sort_key_prefix)

        kwargs = {"KeyConditionExpression": condition}
        items = []
        while True:
            page = self.table.query(**kwargs)
            items.extend(from_dynamo(item) for item in page.get('Items', []))
            if not page.get('LastEvaluatedKey'):
                return items
            kwargs["ExclusiveStartKey"] = page['LastEvaluatedKey']

    def delete_item(self, key: Dict[str, str]) -> Dict[str, Any]:
        """Delete the item at key; deleting a missing item is not an error."""
        return self.table.delete_item(Key=key)

    def delete_items(self, keys: List[Dict[str, str]]) -> None:
        """Delete many items through a batch writer, 25 keys per request."""
        with self.table.batch_writer() as batch:
            for key in keys:
                batch.delete_item(Key=key)

def to_dynamo(value: Any) -> Any:
    """Replace floats with Decimal, the only number type boto3 accepts."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: to_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_dynamo(v) for v in value]
    return value

def from_dynamo(value: Any) -> Any:
    """Replace Decimal with int for whole numbers and float otherwise."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_dynamo(v) for v in value]
    return value

def create_pk(user_id: str) -> str:
    return f"USER#{user_id}"

def create_cycle_sk(cycle_id: int) -> str:
    return f"CYCLE#{cycle_id:04d}"

def create_entry_sk(cycle_id: int, date_str: str) -> str:
    """Sort key of the entry for date_str (ISO date) in cycle_id."""
    return f"{create_cycle_sk(cycle_id)}#ENTRY#{date_str}"
