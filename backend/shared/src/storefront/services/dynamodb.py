"""DynamoDB access for storefront tables.

Table names are prefixed per deployment (``storefront-{env}-orders``), or with
DYNAMODB_TABLE_PREFIX when set, so the same code runs against every stage and
against moto in tests.
"""

import os
from typing import Any

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

_CONDITION_FAILED = "ConditionalCheckFailedException"

# Reused across warm Lambda invocations
_dynamodb_service_instance: "DynamoDBService | None" = None


def get_dynamodb_service(environment: str | None = None) -> "DynamoDBService":
    """Get the shared DynamoDBService, creating it on first use.

    Args:
        environment: Deployment stage. Only used on first call.
    """
    global _dynamodb_service_instance
    if _dynamodb_service_instance is None:
        _dynamodb_service_instance = DynamoDBService(environment)
    return _dynamodb_service_instance


def reset_dynamodb_service() -> None:
    """Drop the shared instance (for testing only).

    The next get_dynamodb_service() call builds a boto3 resource inside the
    active mock_aws context.
    """
    global _dynamodb_service_instance
    _dynamodb_service_instance = None


def _condition_failed(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") == _CONDITION_FAILED


class DynamoDBService:
    """Thin wrapper over the boto3 table resource with stage-aware names."""

    def __init__(self, environment: str | None = None) -> None:
        """Initialize DynamoDB service.

        Args:
            environment: Deployment stage (dev/prod). Defaults to ENVIRONMENT.
        """
        self.environment = environment or os.getenv("ENVIRONMENT", "dev")
        self.name_prefix = os.getenv(
            "DYNAMODB_TABLE_PREFIX", f"storefront-{self.environment}"
        )
        self._resource = boto3.resource("dynamodb")

    def table_name(self, table: str) -> str:
        """Full table name for a logical table (e.g. "orders")."""
        return f"{self.name_prefix}-{table}"

    def _table(self, table: str) -> Any:
        return self._resource.Table(self.table_name(table))

    def get_item(
        self,
        table: str,
        key: dict[str, Any],
        *,
        consistent_read: bool = True,
    ) -> dict[str, Any] | None:
        """Read one item by primary key.

        Reads are strongly consistent by default so a status polled right
        after a webhook update reflects it.

        Returns:
            The item, or None if it does not exist
        """
        response = self._table(table).get_item(Key=key, ConsistentRead=consistent_read)
        item: dict[str, Any] | None = response.get("Item")
        return item

    def put_item(self, table: str, item: dict[str, Any]) -> None:
        """Write a whole item, replacing any existing one."""
        self._table(table).put_item(Item=item)

    def update_item(
        self,
        table: str,
        key: dict[str, Any],
        *,
        update_expression: str,
        values: dict[str, Any],
        names: dict[str, str] | None = None,
        condition: str | None = None,
        return_values: str = "ALL_NEW",
    ) -> dict[str, Any] | None:
        """Apply an update expression to one item.

        Args:
            table: Logical table name
            key: Primary key
            update_expression: SET/REMOVE expression
            values: ExpressionAttributeValues
            names: ExpressionAttributeNames, needed for reserved words
            condition: ConditionExpression the item must satisfy
            return_values: ReturnValues (ALL_NEW, ALL_OLD, ...)

        Returns:
            Attributes selected by return_values ({} for NONE), or None when
            the condition did not hold

        Raises:
            ClientError: For any failure other than the condition check
        """
        kwargs: dict[str, Any] = {
            "Key": key,
            "UpdateExpression": update_expression,
            "ExpressionAttributeValues": values,
            "ReturnValues": return_values,
        }
        if names:
            kwargs["ExpressionAttributeNames"] = names
        if condition:
            kwargs["ConditionExpression"] = condition

        try:
            response = self._table(table).update_item(**kwargs)
        except ClientError as e:
            if _condition_failed(e):
                return None
            raise
        attributes: dict[str, Any] = response.get("Attributes", {})
        return attributes

    def query_by_gsi(
        self,
        table: str,
        index_name: str,
        attribute: str,
        value: str,
    ) -> list[dict[str, Any]]:
        """Return every item of a GSI partition, following pagination.

        Args:
            table: Logical table name
            index_name: GSI name
            attribute: GSI partition key attribute
            value: Partition key value
        """
        kwargs: dict[str, Any] = {
            "IndexName": index_name,
            "KeyConditionExpression": Key(attribute).eq(value),
        }
        items: list[dict[str, Any]] = []
        while True:
            response = self._table(table).query(**kwargs)
            items.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key
