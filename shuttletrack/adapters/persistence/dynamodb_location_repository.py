from __future__ import annotations

import json
import os
from dataclasses import dataclass

from shuttletrack.adapters.aws import dynamodb_client
from shuttletrack.app.ports.output import ILocationRepository
from shuttletrack.domain.models import Location

from .records import location_to_record


@dataclass(slots=True)
class DynamoDbLocationRepository(ILocationRepository):
    """Stores created locations in DynamoDB, keyed by vehicle and creation time.

    Env vars:
      - LOCATIONS_TABLE (default: shuttletrack-locations)
      - ENDPOINT_URL (preferred for LocalStack)
      - AWS_REGION
    """

    table_name: str | None = None

    def _table(self) -> str:
        return (
            self.table_name or os.getenv("LOCATIONS_TABLE") or "shuttletrack-locations"
        )

    @staticmethod
    def _partition_key(location: Location) -> str:
        return location.vehicle_id or f"tracker:{location.tracker_id}"

    def put_location(self, location: Location) -> None:
        created_ms = int(location.created.timestamp() * 1000)
        ddb = dynamodb_client()
        ddb.put_item(
            TableName=self._table(),
            Item={
                "vehicle_id": {"S": self._partition_key(location)},
                "created_at_ms": {"N": str(created_ms)},
                "location_id": {"N": str(location.id)},
                "route_id": {"S": location.route_id or ""},
                "payload": {"S": json.dumps(location_to_record(location))},
            },
        )
