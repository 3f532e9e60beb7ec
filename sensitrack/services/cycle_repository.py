"""
Cycle storage service.

This module persists cycles and their daily entries in DynamoDB and keeps
the one-entry-per-date invariant the analysis engine relies on: saving an
entry for a date that already has one merges into it.

Typical usage:
    repository = CycleRepository()
    cycle = repository.start_new_cycle(user_id, date(2025, 3, 1))
    repository.upsert_entry(user_id, cycle.id, {"date": "2025-03-02", "temp": 36.4})
    cycle = repository.get_cycle(user_id, cycle.id)
"""
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError
from pydantic import ValidationError
from pydantic.alias_generators import to_snake

from sensitrack.models.entry import Cycle, CycleEntry
from sensitrack.services.constants import NO_BLEEDING
from sensitrack.services.exceptions import (
    CycleNotFoundError,
    CycleStorageError,
    InvalidEntryError,
)
from sensitrack.utils.dynamo import get_dynamo, create_pk, create_cycle_sk, create_entry_sk

logger = Logger()

CYCLE_PREFIX = "CYCLE#"
ENTRY_MARKER = "#ENTRY#"
STORAGE_KEYS = {"PK", "SK", "item_type", "cycle_id"}
MUCUS_FIELDS = ("mucus_sensation", "mucus_aspect")


def parse_date(value: Union[str, date, None]) -> date:
    """
    Parse an ISO date or pass a date through.

    Raises:
        InvalidEntryError: If the value is missing or not a valid date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            pass
    raise InvalidEntryError(f"Invalid entry date: {value!r}")


def _clean_entry_data(entry_data: Mapping[str, Any]) -> Dict[str, Any]:
    """Snake-case the keys and drop empty values so they never overwrite stored ones."""
    return {
        to_snake(key): value
        for key, value in entry_data.items()
        if value is not None and value != ""
    }


class CycleRepository:
    """Service for storing cycles and entries."""

    def __init__(self):
        """Initialize cycle repository."""
        self.dynamo = get_dynamo()

    def _query(self, user_id: str, prefix: str) -> List[Dict[str, Any]]:
        try:
            return self.dynamo.query_items(
                partition_key="PK",
                partition_value=create_pk(user_id),
                sort_key_prefix=prefix
            )
        except ClientError as e:
            logger.error("Error querying cycles", extra={
                "user_id": user_id,
                "prefix": prefix,
                "error": str(e),
                "error_type": e.__class__.__name__
            })
            raise CycleStorageError(f"Failed to read cycles: {str(e)}")

    def _put(self, user_id: str, item: Dict[str, Any]) -> None:
        try:
            self.dynamo.put_item(item)
        except ClientError as e:
            logger.error("Error writing item", extra={
                "user_id": user_id,
                "sk": item.get("SK"),
                "error": str(e),
                "error_type": e.__class__.__name__
            })
            raise CycleStorageError(f"Failed to save item: {str(e)}")

    def _delete(self, user_id: str, sk: str) -> None:
        try:
            self.dynamo.delete_item({"PK": create_pk(user_id), "SK": sk})
        except ClientError as e:
            logger.error("Error deleting item", extra={
                "user_id": user_id,
                "sk": sk,
                "error": str(e),
                "error_type": e.__class__.__name__
            })
            raise CycleStorageError(f"Failed to delete item: {str(e)}")

    def _get_cycle_item(self, user_id: str, cycle_id: int) -> Dict[str, Any]:
        try:
            item = self.dynamo.get_item({
                "PK": create_pk(user_id),
                "SK": create_cycle_sk(cycle_id)
            })
        except ClientError as e:
            logger.error("Error reading cycle", extra={
                "user_id": user_id,
                "cycle_id": cycle_id,
                "error": str(e),
                "error_type": e.__class__.__name__
            })
            raise CycleStorageError(f"Failed to read cycle: {str(e)}")
        if not item:
            raise CycleNotFoundError(f"Cycle {cycle_id} not found")
        return item

    @staticmethod
    def _to_entry(item: Dict[str, Any]) -> CycleEntry:
        return CycleEntry.model_validate(
            {key: value for key, value in item.items() if key not in STORAGE_KEYS}
        )

    @staticmethod
    def _build_cycles(items: List[Dict[str, Any]]) -> List[Cycle]:
        metadata = {}
        entries: Dict[int, List[CycleEntry]] = {}
        for item in items:
            cycle_id = int(item["cycle_id"])
            if ENTRY_MARKER in item["SK"]:
                entries.setdefault(cycle_id, []).append(CycleRepository._to_entry(item))
            else:
                metadata[cycle_id] = item

        return [
            Cycle(
                id=cycle_id,
                start_date=metadata[cycle_id].get("start_date"),
                entries=sorted(entries.get(cycle_id, []), key=lambda entry: entry.date)
            )
            for cycle_id in sorted(metadata)
        ]

    def list_cycles(self, user_id: str) -> List[Cycle]:
        """
        Get every cycle of a user with its entries, oldest first.

        Raises:
            CycleStorageError: If the table cannot be read
        """
        cycles = self._build_cycles(self._query(user_id, CYCLE_PREFIX))
        logger.info("Loaded cycles", extra={
            "user_id": user_id,
            "cycle_count": len(cycles)
        })
        return cycles

    def get_cycle(self, user_id: str, cycle_id: int) -> Cycle:
        """
        Get one cycle with its entries.

        Raises:
            CycleNotFoundError: If the cycle does not exist
            CycleStorageError: If the table cannot be read
        """
        cycles = self._build_cycles(self._query(user_id, create_cycle_sk(cycle_id)))
        for cycle in cycles:
            if cycle.id == cycle_id:
                return cycle
        raise CycleNotFoundError(f"Cycle {cycle_id} not found")

    def get_latest_cycle(self, user_id: str) -> Optional[Cycle]:
        """Get the most recent cycle, or None when the user has none."""
        cycles = self.list_cycles(user_id)
        return cycles[-1] if cycles else None

    def start_new_cycle(self, user_id: str, start_date: Union[str, date]) -> Cycle:
        """
        Create a new cycle numbered after the highest existing one.

        Args:
            user_id: Owner of the cycle
            start_date: First day of the cycle

        Returns:
            The new, empty cycle

        Raises:
            InvalidEntryError: If the start date is invalid
        """
        start = parse_date(start_date)
        existing = self.list_cycles(user_id)
        cycle_id = max((cycle.id for cycle in existing), default=0) + 1

        self._put(user_id, {
            "PK": create_pk(user_id),
            "SK": create_cycle_sk(cycle_id),
            "item_type": "cycle",
            "cycle_id": cycle_id,
            "start_date": start.isoformat()
        })
        logger.info("Started new cycle", extra={
            "user_id": user_id,
            "cycle_id": cycle_id,
            "start_date": start.isoformat()
        })
        return Cycle(id=cycle_id, start_date=start)

    def update_cycle_start_date(self, user_id: str, cycle_id: int, start_date: Union[str, date]) -> None:
        """Move the first day of an existing cycle."""
        start = parse_date(start_date)
        item = self._get_cycle_item(user_id, cycle_id)
        item["start_date"] = start.isoformat()
        self._put(user_id, item)

    def delete_cycle(self, user_id: str, cycle_id: int) -> None:
        """Delete a cycle and all of its entries."""
        keys = [
            {"PK": create_pk(user_id), "SK": item["SK"]}
            for item in self._query(user_id, create_cycle_sk(cycle_id))
            if int(item["cycle_id"]) == cycle_id
        ]
        try:
            self.dynamo.delete_items(keys)
        except ClientError as e:
            logger.error("Error deleting cycle", extra={
                "user_id": user_id,
                "cycle_id": cycle_id,
                "error": str(e),
                "error_type": e.__class__.__name__
            })
            raise CycleStorageError(f"Failed to delete cycle {cycle_id}: {str(e)}")
        logger.info("Deleted cycle", extra={
            "user_id": user_id,
            "cycle_id": cycle_id,
            "items_deleted": len(keys)
        })

    def upsert_entry(self, user_id: str, cycle_id: int, entry_data: Mapping[str, Any]) -> CycleEntry:
        """
        Save a day's observations, merging with any entry for the same date.

        Empty values never overwrite stored ones. Recording a bleeding level
        clears the day's mucus observation and recording mucus resets the
        bleeding to none, as the two are mutually exclusive for a day.

        Args:
            user_id: Owner of the cycle
            cycle_id: Cycle the entry belongs to
            entry_data: Entry fields, snake_case or camelCase keys

        Returns:
            The merged entry as stored

        Raises:
            InvalidEntryError: If the date is missing/invalid or a field does not validate
            CycleNotFoundError: If the cycle does not exist
        """
        clean = _clean_entry_data(entry_data)
        entry_date = parse_date(clean.get("date"))
        clean["date"] = entry_date.isoformat()
        self._get_cycle_item(user_id, cycle_id)

        sk = create_entry_sk(cycle_id, entry_date.isoformat())
        try:
            existing = self.dynamo.get_item({"PK": create_pk(user_id), "SK": sk}) or {}
        except ClientError as e:
            logger.error("Error reading entry", extra={
                "user_id": user_id,
                "sk": sk,
                "error": str(e),
                "error_type": e.__class__.__name__
            })
            raise CycleStorageError(f"Failed to read entry: {str(e)}")

        merged = {key: value for key, value in existing.items() if key not in STORAGE_KEYS}
        merged.update(clean)

        bleeding = clean.get("bleeding")
        if bleeding and bleeding != NO_BLEEDING:
            for field in MUCUS_FIELDS:
                merged.pop(field, None)
        elif any(field in clean for field in MUCUS_FIELDS):
            merged["bleeding"] = NO_BLEEDING

        try:
            entry = CycleEntry.model_validate(merged)
        except ValidationError as e:
            raise InvalidEntryError(f"Invalid entry: {str(e)}")

        item = entry.model_dump(mode="json", exclude_none=True)
        item.update({
            "PK": create_pk(user_id),
            "SK": sk,
            "item_type": "entry",
            "cycle_id": cycle_id
        })
        self._put(user_id, item)

        logger.info("Saved entry", extra={
            "user_id": user_id,
            "cycle_id": cycle_id,
            "date": entry_date.isoformat(),
            "merged": bool(existing)
        })
        return entry

    def delete_entry(self, user_id: str, cycle_id: int, entry_date: Union[str, date]) -> None:
        """Delete the entry of one date."""
        day = parse_date(entry_date)
        self._delete(user_id, create_entry_sk(cycle_id, day.isoformat()))
        logger.info("Deleted entry", extra={
            "user_id": user_id,
            "cycle_id": cycle_id,
            "date": day.isoformat()
        })
