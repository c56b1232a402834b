"""
Business logic for the service catalog.

Public listings only show ``active`` services.  Deleting a service is a
soft delete: its status becomes ``retired`` and existing bookings keep
referencing it.
"""

import logging
from typing import List, Optional

from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database

from ..core.db import SERVICES, in_threadpool, parse_object_id, utcnow
from ..core.errors import NotFoundError
from ..schemas.service import (
    DEFAULT_IMAGE,
    ServiceCategory,
    ServiceCreate,
    ServiceRead,
    ServiceStatus,
    ServiceUpdate,
)


logger = logging.getLogger(__name__)


def service_to_read(doc: dict) -> ServiceRead:
    status = doc.get("status", ServiceStatus.ACTIVE.value)
    return ServiceRead(
        id=str(doc["_id"]),
        name=doc["name"],
        description=doc["description"],
        category=doc["category"],
        price=doc["price"],
        duration=doc["duration"],
        image=doc.get("image") or DEFAULT_IMAGE,
        status=status,
        is_active=status == ServiceStatus.ACTIVE.value,
        created_at=doc["created_at"],
    )


class CatalogService:
    """Create, list, update and retire catalog entries."""

    def __init__(self, db: Database) -> None:
        self.collection = db[SERVICES]

    def _find(self, service_id: str) -> dict:
        oid = parse_object_id(service_id)
        doc = self.collection.find_one({"_id": oid}) if oid else None
        if not doc:
            raise NotFoundError("Service not found")
        return doc

    @in_threadpool
    def list_services(self, category: Optional[ServiceCategory] = None) -> List[ServiceRead]:
        """Return active services, optionally restricted to one category."""
        query: dict = {"status": ServiceStatus.ACTIVE.value}
        if category is not None:
            query["category"] = category.value
        return [service_to_read(doc) for doc in self.collection.find(query)]

    @in_threadpool
    def get_service(self, service_id: str) -> ServiceRead:
        return service_to_read(self._find(service_id))

    @in_threadpool
    def create_service(self, data: ServiceCreate) -> ServiceRead:
        doc = data.model_dump(mode="json")
        doc["status"] = ServiceStatus.ACTIVE.value
        doc["created_at"] = utcnow()
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info("Created service %s (%s)", result.inserted_id, data.name)
        return service_to_read(doc)

    @in_threadpool
    def list_all_services(self) -> List[ServiceRead]:
        """Return every service, retired ones included, newest first."""
        cursor = self.collection.find().sort("created_at", DESCENDING)
        return [service_to_read(doc) for doc in cursor]

    @in_threadpool
    def update_service(self, service_id: str, patch: ServiceUpdate) -> ServiceRead:
        """Apply the fields set in ``patch``.

        Field validation happens on the ``ServiceUpdate`` model, so a
        negative price never reaches the store.
        """
        doc = self._find(service_id)
        changes = {
            key: value
            for key, value in patch.model_dump(mode="json", exclude_unset=True).items()
            if value is not None
        }
        if not changes:
            return service_to_read(doc)
        updated = self.collection.find_one_and_update(
            {"_id": doc["_id"]},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if not updated:
            raise NotFoundError("Service not found")
        logger.info("Updated service %s: %s", service_id, ", ".join(sorted(changes)))
        return service_to_read(updated)

    @in_threadpool
    def deactivate_service(self, service_id: str) -> None:
        doc = self._find(service_id)
        self.collection.update_one(
            {"_id": doc["_id"]},
            {"$set": {"status": ServiceStatus.RETIRED.value}},
        )
        logger.info("Retired service %s", service_id)
