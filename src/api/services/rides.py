"""
Ride lifecycle state machine.

REQUESTED -> ACCEPTED -> COMPLETED, nothing else. Role gating (who may
create, accept, complete) happens in the API layer before these methods run;
this service checks existence, current status, and the completion policy.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from src.api.config import CompletionPolicy
from src.api.errors import (
    InvalidStateTransitionError,
    NotFoundError,
    PermissionDeniedError,
    TransitionConflictError,
)
from src.api.models.ride import RIDE_TRANSITIONS, Ride, RideStatus
from src.api.models.user import User
from src.api.repositories.rides import RideRepository
from src.api.repositories.users import UserRepository

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    """Return an aware UTC timestamp."""
    return datetime.now(timezone.utc)


class RideService:
    def __init__(
        self,
        rides: RideRepository,
        users: UserRepository,
        completion_policy: CompletionPolicy = CompletionPolicy.any,
    ):
        self.rides = rides
        self.users = users
        self.completion_policy = completion_policy

    def _require_user(self, username: str, message: str = "User not found") -> User:
        user = self.users.find_by_username(username)
        if user is None:
            raise NotFoundError(message)
        return user

    def _require_ride(self, ride_id: str | UUID) -> Ride:
        ride = self.rides.find_by_id(ride_id)
        if ride is None:
            raise NotFoundError("Ride not found")
        return ride

    def _advance(self, ride: Ride, expected: RideStatus, driver_id: Optional[UUID] = None) -> Ride:
        """Apply the single legal transition out of `expected` with a guarded write."""
        new_status = RIDE_TRANSITIONS[expected]
        if not self.rides.transition(ride.id, expected, new_status, driver_id=driver_id):
            logger.warning(
                "Ride transition lost a race",
                extra={"ride_id": str(ride.id), "from_status": expected.value, "to_status": new_status.value},
            )
            raise TransitionConflictError("Ride was already transitioned by another request")

        logger.info(
            "Ride transitioned",
            extra={"ride_id": str(ride.id), "from_status": expected.value, "to_status": new_status.value},
        )
        return self._require_ride(ride.id)

    # PUBLIC_INTERFACE
    def create_ride(self, pickup_location: str, drop_location: str, username: str) -> Ride:
        """Create a REQUESTED ride owned by `username`. NotFoundError if the user is unknown."""
        user = self._require_user(username)

        ride = Ride(
            user_id=user.id,
            driver_id=None,
            pickup_location=pickup_location,
            drop_location=drop_location,
            status=RideStatus.REQUESTED,
            created_at=_utcnow(),
        )
        ride = self.rides.save(ride)
        logger.info("Ride requested", extra={"ride_id": str(ride.id), "username": username})
        return ride

    # PUBLIC_INTERFACE
    def get_user_rides(self, username: str) -> List[Ride]:
        user = self._require_user(username)
        return self.rides.find_by_user_id(user.id)

    # PUBLIC_INTERFACE
    def get_pending_rides(self) -> List[Ride]:
        return self.rides.find_by_status(RideStatus.REQUESTED)

    # PUBLIC_INTERFACE
    def accept_ride(self, ride_id: str | UUID, driver_username: str) -> Ride:
        """
        Assign the driver to a REQUESTED ride and move it to ACCEPTED.

        Checks, in order: the ride exists, it is REQUESTED, the driver exists.
        The driver's role is not checked here.

        Errors:
        - NotFoundError: unknown ride or driver
        - InvalidStateTransitionError: ride is not REQUESTED
        - TransitionConflictError: another driver accepted it concurrently
        """
        ride = self._require_ride(ride_id)
        if ride.status != RideStatus.REQUESTED:
            raise InvalidStateTransitionError("Ride is not in REQUESTED status")

        driver = self._require_user(driver_username, "Driver not found")
        return self._advance(ride, RideStatus.REQUESTED, driver_id=driver.id)

    # PUBLIC_INTERFACE
    def complete_ride(self, ride_id: str | UUID, caller_username: Optional[str] = None) -> Ride:
        """
        Move an ACCEPTED ride to COMPLETED.

        Under CompletionPolicy.participants only the ride's rider or its
        assigned driver may complete it; CompletionPolicy.any performs no
        identity check.

        Errors:
        - NotFoundError: unknown ride, or unknown caller under the participants policy
        - InvalidStateTransitionError: ride is not ACCEPTED
        - PermissionDeniedError: caller is neither rider nor driver of the ride
        - TransitionConflictError: the ride changed status concurrently
        """
        ride = self._require_ride(ride_id)
        if ride.status != RideStatus.ACCEPTED:
            raise InvalidStateTransitionError("Ride must be ACCEPTED to complete")

        if self.completion_policy == CompletionPolicy.participants:
            self._check_participant(ride, caller_username)

        return self._advance(ride, RideStatus.ACCEPTED)

    def _check_participant(self, ride: Ride, caller_username: Optional[str]) -> None:
        if caller_username is None:
            raise PermissionDeniedError("Only the rider or the assigned driver may complete this ride")
        caller = self._require_user(caller_username)
        if caller.id not in (ride.user_id, ride.driver_id):
            raise PermissionDeniedError("Only the rider or the assigned driver may complete this ride")
