"""
Database models for Guildhall (authoritative ORM definitions).

Defines the SQLAlchemy Base with a naming convention for stable constraint
names, plus the profile / server / member / channel tables.
"""

import enum
from datetime import UTC, datetime

from sqlalchemy import (
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all database models."""

    metadata = MetaData(naming_convention=naming_convention)


class MemberRole(enum.Enum):
    """Role of a member within a server."""

    ADMIN = "ADMIN"
    MODERATOR = "MODERATOR"
    GUEST = "GUEST"


class ChannelType(enum.Enum):
    """Kind of channel on a server."""

    TEXT = "TEXT"
    AUDIO = "AUDIO"
    VIDEO = "VIDEO"


class Profiles(Base):
    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str | None] = mapped_column(String(255))
    image_url: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(True), default=utcnow, onupdate=utcnow
    )

    servers: Mapped[list["Servers"]] = relationship(
        "Servers", uselist=True, back_populates="profile"
    )
    members: Mapped[list["Members"]] = relationship(
        "Members", uselist=True, back_populates="profile"
    )


class Servers(Base):
    __tablename__ = "servers"
    __table_args__ = (Index("idx_servers_profile", "profile_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    invite_code: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    profile_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(True), default=utcnow, onupdate=utcnow
    )

    profile: Mapped["Profiles"] = relationship("Profiles", back_populates="servers")
    members: Mapped[list["Members"]] = relationship(
        "Members",
        uselist=True,
        back_populates="server",
        cascade="all, delete-orphan",
        order_by="Members.id",
    )
    channels: Mapped[list["Channels"]] = relationship(
        "Channels",
        uselist=True,
        back_populates="server",
        cascade="all, delete-orphan",
        order_by="Channels.id",
    )


class Members(Base):
    __tablename__ = "members"
    __table_args__ = (
        Index("idx_members_profile", "profile_id"),
        Index("idx_members_server", "server_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    role: Mapped[MemberRole] = mapped_column(
        Enum(MemberRole, name="member_role"), nullable=False, default=MemberRole.GUEST
    )
    profile_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    server_id: Mapped[int] = mapped_column(
        ForeignKey("servers.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(True), default=utcnow, onupdate=utcnow
    )

    profile: Mapped["Profiles"] = relationship("Profiles", back_populates="members")
    server: Mapped["Servers"] = relationship("Servers", back_populates="members")


class Channels(Base):
    __tablename__ = "channels"
    __table_args__ = (
        Index("idx_channels_profile", "profile_id"),
        Index("idx_channels_server", "server_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[ChannelType] = mapped_column(
        Enum(ChannelType, name="channel_type"), nullable=False, default=ChannelType.TEXT
    )
    profile_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    server_id: Mapped[int] = mapped_column(
        ForeignKey("servers.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(True), default=utcnow, onupdate=utcnow
    )

    server: Mapped["Servers"] = relationship("Servers", back_populates="channels")


target_metadata = Base.metadata
