"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

from datetime import datetime, time

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Time,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from autoassign.adapters.persistence.database import Base


class PolicyModel(Base):
    __tablename__ = "auto_assignment_policies"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    max_assigned_tickets: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    refill_threshold: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    priority_order: Mapped[str] = mapped_column(
        String(20), nullable=False, default="priority_first"
    )
    channels: Mapped[list[str]] = mapped_column(ARRAY(String(50)), nullable=False, default=list)
    business_hours_only: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class AgentModel(Base):
    __tablename__ = "agents"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="agent")
    availability_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="offline"
    )
    # NULL means "never set" and reads as enabled
    auto_assign_enabled: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    auto_assign_max: Mapped[int | None] = mapped_column(Integer, nullable=True)
    auto_assign_channels: Mapped[list[str] | None] = mapped_column(
        ARRAY(String(50)), nullable=True
    )

    work_items: Mapped[list["WorkItemModel"]] = relationship(back_populates="assigned_agent")


class WorkItemModel(Base):
    __tablename__ = "work_items"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    human_number: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    channel: Mapped[str] = mapped_column(String(50), nullable=False)
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default="normal")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="open")
    assigned_agent_id: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("agents.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    assigned_agent: Mapped["AgentModel | None"] = relationship(back_populates="work_items")

    __table_args__ = (
        Index("idx_work_items_queue", "status", "assigned_agent_id", "channel"),
        Index("idx_work_items_agent", "assigned_agent_id"),
    )


class AssignmentRecordModel(Base):
    __tablename__ = "assignment_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    work_item_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("work_items.id"), nullable=False
    )
    work_item_number: Mapped[str] = mapped_column(String(50), nullable=False)
    assigned_agent_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("agents.id"), nullable=False
    )
    reason: Mapped[str] = mapped_column(String(30), nullable=False)
    agent_load_after_assignment: Mapped[int] = mapped_column(Integer, nullable=False)
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("idx_assignment_records_assigned_at", "assigned_at"),
        Index("idx_assignment_records_agent", "assigned_agent_id"),
    )


class BusinessHoursModel(Base):
    __tablename__ = "business_hours"

    day_of_week: Mapped[int] = mapped_column(Integer, primary_key=True)  # 0 = Monday
    is_open: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    open_time: Mapped[time] = mapped_column(Time, nullable=False)
    close_time: Mapped[time] = mapped_column(Time, nullable=False)
