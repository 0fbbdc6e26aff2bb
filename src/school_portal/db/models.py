"""
school_portal.db.models

Persistence schema for the portal.

Responsibilities:
- Define the `Admin` account model used by authentication.
- Define one flat ORM model per content resource (FAQ, career, blog, ...).
  Resources have no relationships between each other; uploaded files are stored
  as JSON descriptors `{"fileId": ..., "file": ...}`.
"""

from __future__ import annotations

import enum
import uuid
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, Enum, Float, String, Text, UniqueConstraint, Uuid as SAUuid
from sqlalchemy.orm import Mapped, mapped_column

from school_portal.db.base import Base


def utcnow() -> datetime:
    # Persist naive UTC timestamps; SQLite has no timezone-aware column type.
    return datetime.now(UTC).replace(tzinfo=None)


class UserType(enum.StrEnum):
    admin = "admin"
    super_admin = "super-admin"


class EntryMixin:
    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow, onupdate=utcnow)


class Admin(EntryMixin, Base):
    __tablename__ = "admins"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    password: Mapped[str] = mapped_column(String(256), nullable=False)
    user_type: Mapped[UserType] = mapped_column(
        Enum(UserType), nullable=False, default=UserType.admin
    )

    reset_password_token: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    reset_password_token_expiration: Mapped[datetime | None] = mapped_column(nullable=True)


class Faq(EntryMixin, Base):
    __tablename__ = "faqs"

    question: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    answer: Mapped[str] = mapped_column(Text, nullable=False)


class Career(EntryMixin, Base):
    __tablename__ = "careers"

    title: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    sub_title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[datetime] = mapped_column(nullable=False)
    files: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)


class Blog(EntryMixin, Base):
    __tablename__ = "blogs"

    title: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    banner: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    files: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    images: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    date: Mapped[datetime] = mapped_column(nullable=False)


class Announcement(EntryMixin, Base):
    __tablename__ = "announcements"

    category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(String(50), nullable=False)
    files: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    date: Mapped[datetime] = mapped_column(nullable=False)
    is_headline: Mapped[bool] = mapped_column(nullable=False, default=False)
    is_advertise: Mapped[bool] = mapped_column(nullable=False, default=False)
    advertise_mail_time: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (UniqueConstraint("category", "title", name="uq_announcements_category_title"),)


class Academic(EntryMixin, Base):
    __tablename__ = "academics"

    category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    file: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    publish_date: Mapped[datetime] = mapped_column(nullable=False)
    badge: Mapped[str] = mapped_column(String(50), nullable=False)

    __table_args__ = (UniqueConstraint("category", "title", name="uq_academics_category_title"),)


class Faculty(EntryMixin, Base):
    __tablename__ = "faculties"

    category: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    designation: Mapped[str] = mapped_column(String(50), nullable=False)
    image: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    mobile: Mapped[str] = mapped_column(String(20), nullable=False)
    portfolio: Mapped[str | None] = mapped_column(String(512), nullable=True)


class AboutUs(EntryMixin, Base):
    __tablename__ = "about_us"

    title: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    files: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    images: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)


class GalleryPhoto(EntryMixin, Base):
    __tablename__ = "gallery_photos"

    title: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    images: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)


class GalleryVideo(EntryMixin, Base):
    __tablename__ = "gallery_videos"

    title: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    youtube_links: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)


class HomeCarousel(EntryMixin, Base):
    __tablename__ = "home_carousels"

    images: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)


class SchoolAchievement(EntryMixin, Base):
    __tablename__ = "school_achievements"

    title: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    icon: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)


class SchoolInfo(EntryMixin, Base):
    __tablename__ = "school_infos"

    title: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    icon: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)


class SchoolSpeech(EntryMixin, Base):
    __tablename__ = "school_speeches"

    title: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    image: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)


class Team(EntryMixin, Base):
    __tablename__ = "teams"

    name: Mapped[str] = mapped_column(String(50), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    image: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    join_date: Mapped[datetime] = mapped_column(nullable=False)
    designation: Mapped[str] = mapped_column(String(50), nullable=False)
    organization: Mapped[str] = mapped_column(String(100), nullable=False)


class Donation(EntryMixin, Base):
    __tablename__ = "donations"

    member_name: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False)
    payment_method: Mapped[str] = mapped_column(String(50), nullable=False)
    bank_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    branch_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    date: Mapped[datetime] = mapped_column(nullable=False)


class Configuration(EntryMixin, Base):
    # Singleton: the service layer keeps at most one row.
    __tablename__ = "configurations"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    logo: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    banner: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    address: Mapped[str] = mapped_column(String(200), nullable=False)
    emails: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    contacts: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    social_links: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)


class Newsletter(EntryMixin, Base):
    __tablename__ = "newsletters"

    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)


class Contact(EntryMixin, Base):
    __tablename__ = "contacts"

    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String(100), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)


# --- Module Notes -----------------------------------------------------------
# Python attributes are snake_case; the API exposes camelCase names through the
# resource schemas and `resources.selection.select_fields`.
