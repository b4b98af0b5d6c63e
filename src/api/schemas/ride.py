from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.api.models.ride import RideStatus


class CreateRideRequest(BaseModel):
    pickup_location: str = Field(..., min_length=1, max_length=500, description="Pickup location.")
    drop_location: str = Field(..., min_length=1, max_length=500, description="Drop-off location.")


class RidePublic(BaseModel):
    id: UUID = Field(..., description="Ride id.")
    user_id: UUID = Field(..., description="Id of the rider who requested the ride.")
    driver_id: Optional[UUID] = Field(default=None, description="Accepting driver's user id (nullable).")

    pickup_location: str = Field(..., description="Pickup location.")
    drop_location: str = Field(..., description="Drop-off location.")

    status: RideStatus = Field(..., description="Current ride status.")

    created_at: datetime = Field(..., description="When the ride was created.")
    updated_at: datetime = Field(..., description="When the ride was last updated.")
