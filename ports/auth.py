from __future__ import annotations

from typing import Optional, Protocol

from models.user import User


class SessionProviderPort(Protocol):
    def get_current_user(self) -> Optional[User]:
        ...


class TenantResolverPort(Protocol):
    def resolve_current_tenant_id(self, user: User) -> str:
        ...
