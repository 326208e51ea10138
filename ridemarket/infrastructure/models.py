"""
SQLAlchemy ORM models.

Tables
------
* ``drivers``       -- registered drivers with rating and availability
* ``riders``        -- registered riders with rating
* ``rides``         -- permanent ride records (never deleted)
* ``ride_history``  -- append-only (identity, role, ride) association log
* ``accounts``      -- integer wallet balances, including escrow and platform
* ``sequences``     -- named counters; ``ride`` allocates ride ids

Indexes
-------
* **B-Tree** on ``rides.status``, ``rides.rider_identity``,
  ``rides.driver_identity`` and ``ride_history (identity, role)`` for the
  history accessors.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Index,
    Integer,
    String,
    Text,
)

from .database import Base
from ridemarket.domain.enums import ParticipantRole, RideStatus
from ridemarket.domain.ratings import INITIAL_RATING


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DriverModel(Base):
    __tablename__ = "drivers"

    identity = Column(String(128), primary_key=True)
    name = Column(String(120), nullable=False)
    vehicle_info = Column(String(255), nullable=False)
    rating = Column(Integer, default=INITIAL_RATING, nullable=False)
    total_rides = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_registered = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        CheckConstraint("rating BETWEEN 100 AND 500", name="ck_drivers_rating"),
    )


class RiderModel(Base):
    __tablename__ = "riders"

    identity = Column(String(128), primary_key=True)
    name = Column(String(120), nullable=False)
    rating = Column(Integer, default=INITIAL_RATING, nullable=False)
    total_rides = Column(Integer, default=0, nullable=False)
    is_registered = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (
        CheckConstraint("rating BETWEEN 100 AND 500", name="ck_riders_rating"),
    )


class RideModel(Base):
    __tablename__ = "rides"

    # Assigned from the ``ride`` sequence, never by the database
    id = Column(Integer, primary_key=True, autoincrement=False)
    rider_identity = Column(String(128), nullable=False)
    driver_identity = Column(String(128), nullable=True)

    pickup = Column(Text, nullable=False)
    destination = Column(Text, nullable=False)
    distance = Column(Integer, nullable=False)
    fare = Column(BigInteger, nullable=False)

    status = Column(Enum(RideStatus), default=RideStatus.REQUESTED, nullable=False)
    rider_rated = Column(Boolean, default=False, nullable=False)
    driver_rated = Column(Boolean, default=False, nullable=False)
    cancellation_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        CheckConstraint("distance > 0", name="ck_rides_distance"),
        Index("idx_rides_status", "status"),
        Index("idx_rides_rider", "rider_identity"),
        Index("idx_rides_driver", "driver_identity"),
    )


class RideHistoryModel(Base):
    __tablename__ = "ride_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    identity = Column(String(128), nullable=False)
    role = Column(Enum(ParticipantRole), nullable=False)
    ride_id = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    __table_args__ = (Index("idx_ride_history_identity", "identity", "role"),)


class AccountModel(Base):
    __tablename__ = "accounts"

    identity = Column(String(128), primary_key=True)
    balance = Column(BigInteger, default=0, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_accounts_balance"),
    )


class SequenceModel(Base):
    __tablename__ = "sequences"

    name = Column(String(32), primary_key=True)
    value = Column(Integer, default=0, nullable=False)
