"""
TV provider database models

Tables:
- Channel: Broadcast channels contributed by TV inputs
- Program: Programs scheduled on a channel
- Preference: Installation-scoped key/value preferences

Channels and programs flagged transient are only valid for the current boot
session and are removed by the transient retention guard.
"""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship

from tvprovider.database import Base


# -----------------------------------------------------------------------------
# Channel
# -----------------------------------------------------------------------------

class Channel(Base):
    """A channel provided by a TV input."""
    __tablename__ = "channels"

    id = Column(Integer, primary_key=True, autoincrement=True)
    input_id = Column(String(255), nullable=False)
    display_name = Column(String(255), nullable=True)
    display_number = Column(String(64), nullable=True)
    transient = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    programs = relationship("Program", back_populates="channel", passive_deletes=True)

    __table_args__ = (
        Index("ix_channels_transient", "transient"),
    )

    def __repr__(self) -> str:
        return f"<Channel {self.id} input={self.input_id} transient={self.transient}>"


# -----------------------------------------------------------------------------
# Program
# -----------------------------------------------------------------------------

class Program(Base):
    """A program on a channel. Removed together with its channel."""
    __tablename__ = "programs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    channel_id = Column(
        Integer,
        ForeignKey("channels.id", ondelete="CASCADE"),
        nullable=False,
    )
    title = Column(Text, nullable=True)
    start_time_utc_millis = Column(Integer, nullable=True)
    end_time_utc_millis = Column(Integer, nullable=True)
    transient = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    channel = relationship("Channel", back_populates="programs")

    __table_args__ = (
        Index("ix_programs_channel_id", "channel_id"),
        Index("ix_programs_transient", "transient"),
    )

    def __repr__(self) -> str:
        return f"<Program {self.id} channel={self.channel_id} transient={self.transient}>"


# -----------------------------------------------------------------------------
# Preference
# -----------------------------------------------------------------------------

class Preference(Base):
    """Durable key/value preference, scoped to the installation."""
    __tablename__ = "preferences"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
