from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from src.api.deps import Principal, get_ride_service, require_role
from src.api.models.ride import Ride
from src.api.models.user import UserRole
from src.api.schemas.ride import CreateRideRequest, RidePublic
from src.api.services.rides import RideService

router = APIRouter(prefix="/api/v1", tags=["rides"])

require_rider = require_role(UserRole.USER)
require_driver = require_role(UserRole.DRIVER)
require_participant = require_role(UserRole.USER, UserRole.DRIVER)


def _to_public(ride: Ride) -> RidePublic:
    """Convert ORM Ride row to public schema."""
    return RidePublic(
        id=ride.id,
        user_id=ride.user_id,
        driver_id=ride.driver_id,
        pickup_location=ride.pickup_location,
        drop_location=ride.drop_location,
        status=ride.status,
        created_at=ride.created_at,
        updated_at=ride.updated_at,
    )


@router.post(
    "/rides",
    response_model=RidePublic,
    summary="Request a ride",
    description="Rider creates a new ride request (status=REQUESTED).",
    operation_id="rides_create",
)
def create_ride(
    payload: CreateRideRequest,
    principal: Principal = Depends(require_rider),
    service: RideService = Depends(get_ride_service),
) -> RidePublic:
    """
    Create a new ride request owned by the caller.

    Auth:
    - Bearer JWT required
    - role must be USER
    """
    ride = service.create_ride(payload.pickup_location, payload.drop_location, principal.username)
    return _to_public(ride)


@router.get(
    "/user/rides",
    response_model=List[RidePublic],
    summary="List my rides",
    description="Every ride requested by the caller.",
    operation_id="rides_list_mine",
)
def get_user_rides(
    principal: Principal = Depends(require_rider),
    service: RideService = Depends(get_ride_service),
) -> List[RidePublic]:
    return [_to_public(r) for r in service.get_user_rides(principal.username)]


@router.get(
    "/driver/rides/requests",
    response_model=List[RidePublic],
    summary="List open ride requests",
    description="Every ride still waiting for a driver (status=REQUESTED).",
    operation_id="rides_list_pending",
)
def get_pending_rides(
    principal: Principal = Depends(require_driver),
    service: RideService = Depends(get_ride_service),
) -> List[RidePublic]:
    return [_to_public(r) for r in service.get_pending_rides()]


@router.post(
    "/driver/rides/{ride_id}/accept",
    response_model=RidePublic,
    summary="Accept a ride",
    description="Driver accepts a REQUESTED ride; first accept wins.",
    operation_id="rides_accept",
)
def accept_ride(
    ride_id: str,
    principal: Principal = Depends(require_driver),
    service: RideService = Depends(get_ride_service),
) -> RidePublic:
    """
    Accept a ride as the calling driver.

    Auth:
    - Bearer JWT required
    - role must be DRIVER

    Errors:
    - 404 if the ride does not exist
    - 400 if the ride is not REQUESTED
    - 409 if another driver accepted it at the same time
    """
    return _to_public(service.accept_ride(ride_id, principal.username))


@router.post(
    "/rides/{ride_id}/complete",
    response_model=RidePublic,
    summary="Complete a ride",
    description="Mark an ACCEPTED ride as COMPLETED.",
    operation_id="rides_complete",
)
def complete_ride(
    ride_id: str,
    principal: Principal = Depends(require_participant),
    service: RideService = Depends(get_ride_service),
) -> RidePublic:
    """
    Complete an accepted ride.

    Auth:
    - Bearer JWT required
    - role USER or DRIVER; with RIDE_COMPLETION_POLICY=participants the caller
      must also be the ride's rider or its assigned driver

    Errors:
    - 404 if the ride does not exist
    - 400 if the ride is not ACCEPTED
    - 403 if the completion policy rejects the caller
    """
    return _to_public(service.complete_ride(ride_id, caller_username=principal.username))
