from __future__ import annotations

import logging
from typing import Optional

from models.user import User
from ports.repos import TenantsRepoPort
from services.errors import TenantResolutionError


logger = logging.getLogger(__name__)


class StaticSessionProvider:
    """Session provider for a single, already-authenticated user (or none)."""

    def __init__(self, user: Optional[User]) -> None:
        self.user = user

    def get_current_user(self) -> Optional[User]:
        return self.user


class SettingsSessionProvider:
    """Session provider for the CLI: the acting user comes from CURRENT_USER_ID."""

    def __init__(self, user_id: Optional[str] = None) -> None:
        self.user_id = user_id

    def get_current_user(self) -> Optional[User]:
        user_id = self.user_id
        if not user_id:
            from config.settings import get_settings
            user_id = get_settings().current_user_id
        return User(id=user_id) if user_id else None


class TenantResolver:
    """Resolve the caller's tenant: session app_metadata first, then membership row."""

    def __init__(self, tenants: TenantsRepoPort) -> None:
        self.tenants = tenants

    def resolve_current_tenant_id(self, user: User) -> str:
        from_session = user.app_metadata.get("customer_id")
        if isinstance(from_session, str) and from_session.strip():
            return from_session.strip()
        try:
            customer_id = self.tenants.customer_for_user(user.id)
        except Exception as e:
            raise TenantResolutionError(f"Failed to get customer ID: {e}") from e
        if not customer_id:
            raise TenantResolutionError("Failed to get customer ID: not available")
        return customer_id
