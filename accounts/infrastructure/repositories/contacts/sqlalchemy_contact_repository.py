# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from accounts.domain.users.entities import Address, City, ContactInfo
from accounts.domain.users.repositories import (
    AddressRepository,
    CityRepository,
    ContactInfoRepository,
)
from accounts.infrastructure.db.models import AddressRow, CityRow, ContactInfoRow
from accounts.infrastructure.db.session import SessionFactory
from accounts.infrastructure.unit_of_work import session_for
from accounts.shared.logging import logger


class SqlAlchemyCityRepository(CityRepository):
    """Cities keyed by postal code; the stored name wins over a differing one."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def get_or_create(self, postal_code: int, name: str) -> City:
        with session_for(self._session_factory) as session:
            row = self._find(session, postal_code)
            if row is None:
                row = self._insert(session, postal_code, name)
            elif row.name != name:
                logger.debug(
                    f"city: postal_code={postal_code} keeps name={row.name!r}, "
                    f"ignoring {name!r}"
                )
            return City(postal_code=row.postal_code, name=row.name)

    def _find(self, session: Session, postal_code: int) -> CityRow | None:
        return session.get(CityRow, postal_code)

    def _insert(self, session: Session, postal_code: int, name: str) -> CityRow:
        try:
            with session.begin_nested():
                row = CityRow(postal_code=postal_code, name=name)
                session.add(row)
            return row
        except IntegrityError:
            # a concurrent registration stored this postal code first
            existing = session.get(CityRow, postal_code, populate_existing=True)
            if existing is None:
                raise
            logger.debug(f"city: postal_code={postal_code} inserted concurrently, reusing it")
            return existing


class SqlAlchemyAddressRepository(AddressRepository):
    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def get_or_create(self, address: Address) -> Address:
        with session_for(self._session_factory) as session:
            stmt = select(AddressRow).where(
                AddressRow.street_name == address.street_name,
                AddressRow.city_postal_code == address.postal_code,
            )
            if address.street_number is None:
                stmt = stmt.where(AddressRow.street_number.is_(None))
            else:
                stmt = stmt.where(AddressRow.street_number == address.street_number)

            row = session.scalars(stmt).first()
            if row is None:
                row = AddressRow(
                    id=address.id,
                    street_number=address.street_number,
                    street_name=address.street_name,
                    city_postal_code=address.postal_code,
                )
                session.add(row)
                session.flush()

            return Address(
                id=row.id,
                street_number=row.street_number,
                street_name=row.street_name,
                postal_code=row.city_postal_code,
            )


class SqlAlchemyContactInfoRepository(ContactInfoRepository):
    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def add(self, contact: ContactInfo) -> ContactInfo:
        with session_for(self._session_factory) as session:
            session.add(
                ContactInfoRow(
                    id=contact.id,
                    email=contact.email,
                    phone_number=contact.phone_number,
                    address_id=contact.address_id,
                )
            )
            session.flush()
            return contact
