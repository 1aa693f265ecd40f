from __future__ import annotations

import logging
from typing import Optional

import httpx

from dayplan.errors import ConfigurationError, ProfileError
from dayplan.models import OwnerProfile

logger = logging.getLogger(__name__)


class ClerkIdentityProvider:
    """Resolves an owner id to a display name and primary email via Clerk."""

    def __init__(
        self,
        secret_key: str,
        api_url: str = "https://api.clerk.com/v1",
        timeout_s: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not secret_key.strip():
            raise ConfigurationError("CLERK_SECRET_KEY is missing")
        self.secret_key = secret_key.strip()
        self.api_url = api_url.strip().rstrip("/")
        self.timeout_s = timeout_s
        self.transport = transport

    def get_profile(self, owner_id: str) -> OwnerProfile:
        url = f"{self.api_url}/users/{owner_id}"
        headers = {"Authorization": f"Bearer {self.secret_key}"}

        try:
            with httpx.Client(timeout=self.timeout_s, transport=self.transport) as client:
                r = client.get(url, headers=headers)
                r.raise_for_status()
                user = r.json()
        except httpx.HTTPError as e:
            raise ProfileError(f"Could not load profile for {owner_id}: {e}") from e

        primary_id = user.get("primary_email_address_id")
        primary = next(
            (e for e in user.get("email_addresses") or [] if e.get("id") == primary_id),
            None,
        )
        if not primary or not primary.get("email_address"):
            raise ProfileError(f"User {owner_id} has no primary email")

        name = " ".join(
            p for p in (user.get("first_name"), user.get("last_name")) if p
        ).strip()
        email = primary["email_address"]
        return OwnerProfile(display_name=name or email, primary_email=email)
