"""Relational schema.  Rows are mapped to domain objects by the repositories."""

from __future__ import annotations

import uuid
from datetime import timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
    UniqueConstraint,
)

from lending.infrastructure.persistence.database import Base


class ItemRow(Base):
    __tablename__ = "items"

    id = Column(String(32), primary_key=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    tier = Column(String(16), nullable=False)
    stock = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_items_stock_non_negative"),
    )


class CartLineRow(Base):
    __tablename__ = "cart_lines"

    group_id = Column(String(64), primary_key=True)
    user_id = Column(String(64), primary_key=True)
    item_id = Column(String(32), ForeignKey("items.id"), primary_key=True)
    quantity = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_cart_lines_quantity_positive"),
    )


class TakingRow(Base):
    __tablename__ = "item_takings"

    id = Column(String(32), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    group_id = Column(String(64), nullable=False)
    item_id = Column(String(32), ForeignKey("items.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    taken_at = Column(DateTime(timezone=True), nullable=False)


class BorrowingRow(Base):
    __tablename__ = "borrowings"

    id = Column(String(32), primary_key=True)
    user_id = Column(String(64), nullable=False)
    group_id = Column(String(64), nullable=False)
    item_id = Column(String(32), ForeignKey("items.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    due_date = Column(DateTime(timezone=True), nullable=False)
    borrowed_at = Column(DateTime(timezone=True), nullable=False)
    returned_at = Column(DateTime(timezone=True), nullable=True)
    before_condition = Column(String(16), nullable=False)
    before_condition_url = Column(Text, nullable=True)
    after_condition = Column(String(16), nullable=True)
    after_condition_url = Column(Text, nullable=True)

    __table_args__ = (
        Index("ix_borrowings_item_user", "item_id", "user_id"),
        Index("ix_borrowings_user", "user_id"),
    )


class RequestRow(Base):
    __tablename__ = "item_requests"

    id = Column(String(32), primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    group_id = Column(String(64), nullable=False)
    item_id = Column(String(32), ForeignKey("items.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    status = Column(String(16), nullable=False, default="pending")
    requested_at = Column(DateTime(timezone=True), nullable=False)
    reviewed_by = Column(String(64), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    booking_id = Column(String(32), nullable=True)
    fulfilled_at = Column(DateTime(timezone=True), nullable=True)


class TimeSlotRow(Base):
    __tablename__ = "time_slots"

    id = Column(String(32), primary_key=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)


class AvailabilityRow(Base):
    __tablename__ = "availabilities"

    id = Column(String(32), primary_key=True)
    user_id = Column(String(64), nullable=False)
    time_slot_id = Column(String(32), ForeignKey("time_slots.id"), nullable=False)
    date = Column(Date, nullable=False)
    group_id = Column(String(64), nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "time_slot_id", "date", name="uq_availability_user_slot_date"),
    )


class BookingRow(Base):
    __tablename__ = "bookings"

    id = Column(String(32), primary_key=True)
    requester_id = Column(String(64), nullable=False, index=True)
    manager_id = Column(String(64), nullable=True)
    item_id = Column(String(32), ForeignKey("items.id"), nullable=False)
    group_id = Column(String(64), nullable=False)
    # No FK: cancelled bookings keep pointing at a withdrawn availability.
    availability_id = Column(String(32), nullable=False, index=True)
    pickup_at = Column(DateTime(timezone=True), nullable=False)
    pickup_location = Column(Text, nullable=False)
    return_at = Column(DateTime(timezone=True), nullable=False)
    return_location = Column(Text, nullable=False)
    status = Column(String(32), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    confirmed_by = Column(String(64), nullable=True)

    __table_args__ = (
        Index("ix_bookings_status_created", "status", "created_at"),
    )


class PermissionGrantRow(Base):
    __tablename__ = "permission_grants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False, index=True)
    permission = Column(String(64), nullable=False)
    # NULL means the grant is global.
    scope_id = Column(String(64), nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "permission", "scope_id", name="uq_permission_grant"),
    )


def as_utc(value):
    """Normalise a datetime to UTC.  SQLite hands back naive values."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex
