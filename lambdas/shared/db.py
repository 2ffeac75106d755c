"""DynamoDB storage for serialized roster documents."""

from datetime import UTC, datetime
from typing import Any

import boto3
from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

logger = Logger(child=True)

DOCUMENT_SK = "DOCUMENT"


class RosterTable:
    """Stores one JSON roster document per roster id.

    Items use the single-table layout ``PK=ROSTER#<id>``, ``SK=DOCUMENT``.
    The roster core never calls this; the service persists what the store
    serializes.
    """

    def __init__(self, table_name: str) -> None:
        """Initialize with table name.

        Args:
            table_name: Name of the DynamoDB table
        """
        self.table_name = table_name
        self.dynamodb = boto3.resource("dynamodb")
        self.table = self.dynamodb.Table(table_name)

    @staticmethod
    def keys_for(roster_id: str) -> dict[str, str]:
        """Get the primary key for a roster document."""
        return {"PK": f"ROSTER#{roster_id}", "SK": DOCUMENT_SK}

    def load_document(self, roster_id: str) -> str | None:
        """Fetch the stored roster JSON.

        Args:
            roster_id: Roster identifier

        Returns:
            JSON text, or None if nothing has been saved yet
        """
        key = self.keys_for(roster_id)
        try:
            response = self.table.get_item(Key=key)
        except ClientError as e:
            logger.error("Failed to load roster", extra={"error": str(e), **key})
            raise

        item = response.get("Item")
        if item is None:
            logger.debug("No stored roster", extra=key)
            return None
        logger.debug("Roster loaded", extra={**key, "count": int(item.get("count", 0))})
        return item["document"]

    def save_document(self, roster_id: str, document: str, count: int) -> dict[str, Any]:
        """Overwrite the stored roster JSON.

        Args:
            roster_id: Roster identifier
            document: Serialized roster
            count: Number of records in the document

        Returns:
            The complete item that was stored
        """
        key = self.keys_for(roster_id)
        now = datetime.now(UTC).isoformat()
        item: dict[str, Any] = {
            **key,
            "document": document,
            "count": count,
            "updated_at": now,
        }

        try:
            existing = self.table.get_item(Key=key, ProjectionExpression="created_at")
            item["created_at"] = existing.get("Item", {}).get("created_at", now)
            self.table.put_item(Item=item)
        except ClientError as e:
            logger.error("Failed to save roster", extra={"error": str(e), **key})
            raise

        logger.info("Roster saved", extra={**key, "count": count})
        return item
