"""Ride store: Ride persistence plus the guarded status transition."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol, Union
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from src.api.models.ride import Ride, RideStatus


class RideRepository(Protocol):
    def find_by_id(self, ride_id: Union[str, UUID]) -> Optional[Ride]: ...

    def find_by_user_id(self, user_id: UUID) -> List[Ride]: ...

    def find_by_status(self, status: RideStatus) -> List[Ride]: ...

    def save(self, ride: Ride) -> Ride: ...

    def transition(
        self,
        ride_id: UUID,
        expected: RideStatus,
        new_status: RideStatus,
        driver_id: Optional[UUID] = None,
    ) -> bool: ...


def _utcnow() -> datetime:
    """Return an aware UTC timestamp."""
    return datetime.now(timezone.utc)


def _parse_id(ride_id: Union[str, UUID]) -> Optional[UUID]:
    """Ride ids are opaque to callers; anything that is not a UUID simply matches nothing."""
    if isinstance(ride_id, UUID):
        return ride_id
    try:
        return UUID(str(ride_id))
    except (TypeError, ValueError):
        return None


class SqlRideRepository:
    """RideRepository over a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, ride_id: Union[str, UUID]) -> Optional[Ride]:
        parsed = _parse_id(ride_id)
        if parsed is None:
            return None
        return self.db.get(Ride, parsed)

    def find_by_user_id(self, user_id: UUID) -> List[Ride]:
        stmt = select(Ride).where(Ride.user_id == user_id).order_by(Ride.created_at.asc())
        return list(self.db.scalars(stmt).all())

    def find_by_status(self, status: RideStatus) -> List[Ride]:
        stmt = select(Ride).where(Ride.status == status).order_by(Ride.created_at.asc())
        return list(self.db.scalars(stmt).all())

    def save(self, ride: Ride) -> Ride:
        ride.updated_at = _utcnow()
        self.db.add(ride)
        self.db.commit()
        self.db.refresh(ride)
        return ride

    def transition(
        self,
        ride_id: UUID,
        expected: RideStatus,
        new_status: RideStatus,
        driver_id: Optional[UUID] = None,
    ) -> bool:
        """
        Move a ride from `expected` to `new_status` in a single conditional UPDATE.

        Returns False when the row no longer has status `expected` (another
        request transitioned it first); nothing is written in that case.
        """
        values: Dict[str, Any] = {"status": new_status, "updated_at": _utcnow()}
        if driver_id is not None:
            values["driver_id"] = driver_id

        stmt = (
            update(Ride)
            .where(Ride.id == ride_id, Ride.status == expected)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        self.db.commit()
        return result.rowcount == 1
