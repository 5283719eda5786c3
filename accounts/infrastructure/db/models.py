# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from accounts.infrastructure.db.session import Base


class UserTypeRow(Base):
    __tablename__ = "user_type"
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    type: Mapped[str] = mapped_column(String(32), unique=True)


class CityRow(Base):
    __tablename__ = "city"
    postal_code: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[str] = mapped_column(String(128))


class AddressRow(Base):
    __tablename__ = "address"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    street_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    street_name: Mapped[str] = mapped_column(String(128))
    city_postal_code: Mapped[int] = mapped_column(
        "city", ForeignKey("city.postal_code", ondelete="RESTRICT"), index=True
    )


class ContactInfoRow(Base):
    __tablename__ = "contact_info"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(254))
    phone_number: Mapped[str] = mapped_column(String(32))
    address_id: Mapped[uuid.UUID] = mapped_column(
        "address", ForeignKey("address.id"), index=True
    )


class LoginInformationRow(Base):
    __tablename__ = "login_information"
    username: Mapped[str] = mapped_column(String(64), primary_key=True)
    password: Mapped[str] = mapped_column(String(256))


class UserRow(Base):
    __tablename__ = "app_user"
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(128))
    last_name: Mapped[str] = mapped_column(String(128))
    username: Mapped[str] = mapped_column(
        ForeignKey("login_information.username"), unique=True, index=True
    )
    user_type_id: Mapped[int] = mapped_column(
        "user_type", ForeignKey("user_type.id", ondelete="RESTRICT"), index=True
    )
    contact_info_id: Mapped[uuid.UUID] = mapped_column(
        "contact_info", ForeignKey("contact_info.id", ondelete="CASCADE"), index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC)
    )
    login: Mapped["LoginInformationRow"] = relationship("LoginInformationRow", lazy="joined")
