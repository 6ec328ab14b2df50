from __future__ import annotations

import datetime as dt
import time
import uuid

from sqlalchemy import BigInteger, Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.sqlite import JSON as SQLiteJSON
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

UTC = dt.timezone.utc

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def utcnow() -> dt.datetime:
    return dt.datetime.now(UTC)


def epoch_millis() -> int:
    return int(time.time() * 1000)


def new_identifier() -> str:
    return str(uuid.uuid4())


def day_name(day: dt.date) -> str:
    return DAY_NAMES[day.weekday()]


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_identifier)
    name = Column(String(200), nullable=False)
    employee_id = Column(String(100), nullable=False)
    team_name = Column(String(200), nullable=False)
    email = Column(String(320), nullable=False, unique=True, index=True)
    default_to = Column(Text, nullable=False, default="")
    default_cc = Column(Text, nullable=False, default="")
    saved_colors = Column(SQLiteJSON, nullable=False, default=list)
    theme = Column(String(10), nullable=False, default="light")
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    reports = relationship("Report", back_populates="user", cascade="all, delete-orphan")


class Report(Base):
    __tablename__ = "reports"

    id = Column(String(36), primary_key=True, default=new_identifier)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(String(10), nullable=False, index=True)
    day = Column(String(16), nullable=False)
    tasks = Column(SQLiteJSON, nullable=False, default=list)
    planning_tasks = Column(SQLiteJSON, nullable=False, default=list)
    pre_text = Column(Text, nullable=False, default="")
    post_text = Column(Text, nullable=False, default="")
    theme_color = Column(String(32), nullable=False, default="#70ad47")
    is_plain_theme = Column(Boolean, nullable=False, default=False)
    created_at = Column(BigInteger, nullable=False, default=epoch_millis, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="reports")
