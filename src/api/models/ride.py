from __future__ import annotations

import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum, ForeignKey, Index, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from src.api.models.base import Base


class RideStatus(str, enum.Enum):
    """
    Ride lifecycle states.

    The lifecycle is strictly linear: REQUESTED -> ACCEPTED -> COMPLETED.
    """

    REQUESTED = "REQUESTED"
    ACCEPTED = "ACCEPTED"
    COMPLETED = "COMPLETED"


# Allowed forward transitions; COMPLETED is terminal.
RIDE_TRANSITIONS = {
    RideStatus.REQUESTED: RideStatus.ACCEPTED,
    RideStatus.ACCEPTED: RideStatus.COMPLETED,
}


class Ride(Base):
    """
    ORM model for the `rides` table.

    driver_id is NULL while the ride is REQUESTED and set from acceptance on.
    """

    __tablename__ = "rides"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    driver_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    pickup_location: Mapped[str] = mapped_column(Text, nullable=False)
    drop_location: Mapped[str] = mapped_column(Text, nullable=False)

    status: Mapped[RideStatus] = mapped_column(
        Enum(RideStatus, name="ride_status"),
        nullable=False,
        server_default=RideStatus.REQUESTED.value,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


Index("idx_rides_user_created_at", Ride.user_id, Ride.created_at)
