"""Domain models for accounts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

ADMIN_ROLES = frozenset({"admin", "super_admin"})


@dataclass(slots=True)
class Account:
    id: str
    name: str
    role: str
    is_active: bool
    email: Optional[str] = None
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


@dataclass(slots=True)
class AccountCreateInput:
    name: str
    email: Optional[str] = None
    role: str = "user"
    avatar: Optional[str] = None
    is_active: bool = True
