# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .account_service import AccountService
from .password_hashing import WerkzeugPasswordHasher

__all__ = ["AccountService", "WerkzeugPasswordHasher"]
