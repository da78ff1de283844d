"""SQLAlchemy table definitions for vendor timelines.

The provisioner only creates these tables and seeds `timelines`; the rest of
the rows are written by the application, which relies on the server-side
defaults for `id`, timestamps and milestone flags.
"""
from __future__ import annotations

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Text,
    Uuid,
    false,
    func,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql.functions import FunctionElement

from core.db import Base


MILESTONES = (
    "nda_received",
    "nda_signed",
    "rfi_sent",
    "rfi_due",
    "offer_received",
)


class gen_random_uuid(FunctionElement):
    """Server-generated UUID, rendered per dialect."""

    type = Uuid()
    inherit_cache = True


@compiles(gen_random_uuid)
def _gen_random_uuid_default(element, compiler, **kw):
    return "gen_random_uuid()"


@compiles(gen_random_uuid, "sqlite")
def _gen_random_uuid_sqlite(element, compiler, **kw):
    # 32 hex chars, the CHAR(32) form Uuid uses on SQLite
    return "(lower(hex(randomblob(16))))"


def _uuid_pk() -> Mapped[uuid.UUID]:
    return mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4, server_default=gen_random_uuid()
    )


def _timestamp() -> Mapped[Optional[datetime]]:
    return mapped_column(DateTime(timezone=True), server_default=func.now())


def _milestone_date() -> Mapped[Optional[datetime]]:
    return mapped_column(DateTime(timezone=True), nullable=True)


def _milestone_done() -> Mapped[Optional[bool]]:
    return mapped_column(Boolean, nullable=True, default=False, server_default=false())


# =============================================================================
# Timeline
# =============================================================================


class Timeline(Base):
    """Procurement milestones for one vendor, keyed by `company_id`."""

    __tablename__ = "timelines"

    id: Mapped[uuid.UUID] = _uuid_pk()
    company_id: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    company_name: Mapped[str] = mapped_column(Text, nullable=False)

    nda_received_date: Mapped[Optional[datetime]] = _milestone_date()
    nda_received_completed: Mapped[Optional[bool]] = _milestone_done()
    nda_signed_date: Mapped[Optional[datetime]] = _milestone_date()
    nda_signed_completed: Mapped[Optional[bool]] = _milestone_done()
    rfi_sent_date: Mapped[Optional[datetime]] = _milestone_date()
    rfi_sent_completed: Mapped[Optional[bool]] = _milestone_done()
    rfi_due_date: Mapped[Optional[datetime]] = _milestone_date()
    rfi_due_completed: Mapped[Optional[bool]] = _milestone_done()
    offer_received_date: Mapped[Optional[datetime]] = _milestone_date()
    offer_received_completed: Mapped[Optional[bool]] = _milestone_done()

    created_at: Mapped[Optional[datetime]] = _timestamp()
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    meetings: Mapped[List["Meeting"]] = relationship(
        back_populates="timeline", cascade="all, delete-orphan", passive_deletes=True
    )
    communications: Mapped[List["Communication"]] = relationship(
        back_populates="timeline", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Timeline(company_id={self.company_id!r}, company_name={self.company_name!r})>"


# =============================================================================
# Meetings
# =============================================================================


class Meeting(Base):
    __tablename__ = "meetings"

    id: Mapped[uuid.UUID] = _uuid_pk()
    company_id: Mapped[str] = mapped_column(
        Text, ForeignKey("timelines.company_id", ondelete="CASCADE"), nullable=False
    )
    meeting_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    subject: Mapped[str] = mapped_column(Text, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[Optional[datetime]] = _timestamp()

    timeline: Mapped["Timeline"] = relationship(back_populates="meetings")
    attendees: Mapped[List["MeetingAttendee"]] = relationship(
        back_populates="meeting", cascade="all, delete-orphan", passive_deletes=True
    )


class MeetingAttendee(Base):
    __tablename__ = "meeting_attendees"

    id: Mapped[uuid.UUID] = _uuid_pk()
    meeting_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("meetings.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    role: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[Optional[datetime]] = _timestamp()

    meeting: Mapped["Meeting"] = relationship(back_populates="attendees")


# =============================================================================
# Communications
# =============================================================================


class Communication(Base):
    __tablename__ = "communications"

    id: Mapped[uuid.UUID] = _uuid_pk()
    company_id: Mapped[str] = mapped_column(
        Text, ForeignKey("timelines.company_id", ondelete="CASCADE"), nullable=False
    )
    subject: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    sent_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_by: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[Optional[datetime]] = _timestamp()
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    timeline: Mapped["Timeline"] = relationship(back_populates="communications")
    responses: Mapped[List["CommunicationResponse"]] = relationship(
        back_populates="communication", cascade="all, delete-orphan", passive_deletes=True
    )


class CommunicationResponse(Base):
    __tablename__ = "communication_responses"

    id: Mapped[uuid.UUID] = _uuid_pk()
    communication_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("communications.id", ondelete="CASCADE"), nullable=False
    )
    response: Mapped[str] = mapped_column(Text, nullable=False)
    responder_name: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[Optional[datetime]] = _timestamp()
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    communication: Mapped["Communication"] = relationship(back_populates="responses")


# Creation order: parents before children
TABLE_NAMES = [
    Timeline.__tablename__,
    Meeting.__tablename__,
    MeetingAttendee.__tablename__,
    Communication.__tablename__,
    CommunicationResponse.__tablename__,
]
