import logging
from typing import Optional
from datetime import timezone

from cryptography.fernet import Fernet, InvalidToken
from google.oauth2.credentials import Credentials

from storage import db

logger = logging.getLogger(__name__)

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
CALENDAR_SCOPES = [
    "https://www.googleapis.com/auth/calendar.events",
]


class GoogleAuthStore:
    """Per-owner Google OAuth tokens, Fernet-encrypted at rest in PostgreSQL."""

    def __init__(
        self,
        encryption_key: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
    ):
        # A generated key only lives as long as the process: development only.
        if not encryption_key:
            logger.warning(
                "GOOGLE_TOKEN_ENCRYPTION_KEY not set. Generating a temporary key."
            )
            encryption_key = Fernet.generate_key().decode()

        self.fernet = Fernet(encryption_key.encode())
        self.client_id = client_id
        self.client_secret = client_secret

    def _encrypt(self, data: Optional[str]) -> Optional[str]:
        if not data:
            return None
        return self.fernet.encrypt(data.encode()).decode()

    def _decrypt(self, token: Optional[str]) -> Optional[str]:
        if not token:
            return None
        try:
            return self.fernet.decrypt(token.encode()).decode()
        except InvalidToken:
            logger.error("Failed to decrypt stored Google token (key rotated?)")
            return None

    def seal_state(self, owner_id: str) -> str:
        """Opaque OAuth ``state`` carrying the owner id through Google's redirect."""
        return self.fernet.encrypt(owner_id.encode()).decode()

    def open_state(self, state: str, max_age_s: int = 600) -> Optional[str]:
        try:
            return self.fernet.decrypt(state.encode(), ttl=max_age_s).decode()
        except InvalidToken:
            return None

    async def save_credentials(
        self, owner_id: str, credentials: Credentials, email: Optional[str] = None
    ) -> None:
        """Upsert the owner's tokens. A missing refresh token keeps the stored one."""
        access_token_enc = self._encrypt(credentials.token)
        refresh_token_enc = self._encrypt(credentials.refresh_token)

        await db.execute(
            """
            INSERT INTO google_credentials (owner_id, access_token, refresh_token, token_expiry, email)
            VALUES ($1, $2, $3, $4, $5)
            ON CONFLICT (owner_id) DO UPDATE SET
                access_token = EXCLUDED.access_token,
                refresh_token = COALESCE(EXCLUDED.refresh_token, google_credentials.refresh_token),
                token_expiry = EXCLUDED.token_expiry,
                email = COALESCE(EXCLUDED.email, google_credentials.email),
                updated_at = NOW()
            """,
            owner_id,
            access_token_enc,
            refresh_token_enc,
            credentials.expiry,
            email,
        )
        logger.info(f"Saved Google credentials for owner {owner_id}")

    async def get_credentials(self, owner_id: str) -> Optional[Credentials]:
        row = await db.fetchrow(
            "SELECT access_token, refresh_token, token_expiry FROM google_credentials WHERE owner_id = $1",
            owner_id,
        )
        if not row:
            return None

        access_token = self._decrypt(row["access_token"])
        if not access_token:
            return None

        # google-auth compares expiry against naive UTC
        expiry = row["token_expiry"]
        if expiry and expiry.tzinfo:
            expiry = expiry.astimezone(timezone.utc).replace(tzinfo=None)

        return Credentials(
            token=access_token,
            refresh_token=self._decrypt(row["refresh_token"]),
            token_uri=GOOGLE_TOKEN_URI,
            client_id=self.client_id,
            client_secret=self.client_secret,
            scopes=CALENDAR_SCOPES,
            expiry=expiry,
        )

    async def get_email(self, owner_id: str) -> Optional[str]:
        return await db.fetchval(
            "SELECT email FROM google_credentials WHERE owner_id = $1", owner_id
        )

    async def delete_credentials(self, owner_id: str) -> None:
        await db.execute("DELETE FROM google_credentials WHERE owner_id = $1", owner_id)
        logger.info(f"Deleted Google credentials for owner {owner_id}")
