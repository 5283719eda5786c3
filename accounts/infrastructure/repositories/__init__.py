# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .contacts.sqlalchemy_contact_repository import (
    SqlAlchemyAddressRepository,
    SqlAlchemyCityRepository,
    SqlAlchemyContactInfoRepository,
)
from .users.sqlalchemy_user_repository import (
    SqlAlchemyLoginInfoRepository,
    SqlAlchemyUserRepository,
    SqlAlchemyUserTypeRepository,
)

__all__ = [
    "SqlAlchemyAddressRepository",
    "SqlAlchemyCityRepository",
    "SqlAlchemyContactInfoRepository",
    "SqlAlchemyLoginInfoRepository",
    "SqlAlchemyUserRepository",
    "SqlAlchemyUserTypeRepository",
]
