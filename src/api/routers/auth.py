import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Response
from google_auth_oauthlib.flow import Flow

from api.dependencies import get_config, get_google_auth_store, get_owner_id
from dayplan.config import PlannerConfig
from storage.google_auth import CALENDAR_SCOPES, GoogleAuthStore

router = APIRouter()
logger = logging.getLogger(__name__)

OAUTH_SCOPES = ["openid", "https://www.googleapis.com/auth/userinfo.email", *CALENDAR_SCOPES]


def _build_flow(config: PlannerConfig) -> Flow:
    return Flow.from_client_config(
        {
            "web": {
                "client_id": config.google_client_id,
                "client_secret": config.google_client_secret,
                "auth_uri": "https://accounts.google.com/o/oauth2/auth",
                "token_uri": "https://oauth2.googleapis.com/token",
            }
        },
        scopes=OAUTH_SCOPES,
        redirect_uri=config.google_redirect_uri,
    )


def _redirect_to_frontend(config: PlannerConfig, query: str) -> Response:
    return Response(
        status_code=307,
        headers={"Location": f"{config.frontend_url.rstrip('/')}/calendar?{query}"},
    )


@router.get("/auth/google/login")
async def google_login(
    owner_id: str = Depends(get_owner_id),
    config: PlannerConfig = Depends(get_config),
    google_auth_store: Optional[GoogleAuthStore] = Depends(get_google_auth_store),
):
    """Initiates the OAuth2 flow - redirects to Google."""
    if not config.google_client_id or not config.google_client_secret:
        raise HTTPException(status_code=500, detail="Google credentials not configured")
    if google_auth_store is None:
        raise HTTPException(status_code=503, detail="Auth store not initialized")

    flow = _build_flow(config)
    authorization_url, _ = flow.authorization_url(
        access_type="offline",
        include_granted_scopes="true",
        prompt="consent",
        state=google_auth_store.seal_state(owner_id),
    )

    # Redirect the browser directly to Google's OAuth page
    return Response(status_code=307, headers={"Location": authorization_url})


@router.get("/auth/google/callback")
async def google_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    config: PlannerConfig = Depends(get_config),
    google_auth_store: Optional[GoogleAuthStore] = Depends(get_google_auth_store),
):
    """Handles the OAuth2 callback."""
    if error:
        logger.error(f"OAuth error: {error}")
        return _redirect_to_frontend(config, "error=" + quote(error))

    if google_auth_store is None:
        return _redirect_to_frontend(config, "error=configuration_error")

    owner_id = google_auth_store.open_state(state) if state else None
    if not owner_id or not code:
        logger.warning("OAuth callback with missing or expired state")
        return _redirect_to_frontend(config, "error=invalid_state")

    flow = _build_flow(config)
    try:
        flow.fetch_token(code=code)
    except Exception as e:
        logger.error(f"OAuth token exchange failed for owner {owner_id}: {e}")
        return _redirect_to_frontend(config, "error=token_exchange_failed")

    credentials = flow.credentials

    # Get user email
    email = None
    try:
        session = flow.authorized_session()
        email = session.get("https://www.googleapis.com/oauth2/v2/userinfo").json().get("email")
    except Exception as e:
        logger.warning(f"Failed to fetch Google account email: {e}")

    await google_auth_store.save_credentials(owner_id, credentials, email)  # type: ignore[arg-type]
    return _redirect_to_frontend(config, "success=true")


@router.get("/auth/google/status")
async def google_status(
    owner_id: str = Depends(get_owner_id),
    google_auth_store: Optional[GoogleAuthStore] = Depends(get_google_auth_store),
) -> dict:
    """Check if the owner has a connected calendar."""
    if not google_auth_store:
        return {"connected": False, "error": "Auth store not initialized"}

    creds = await google_auth_store.get_credentials(owner_id)
    email = await google_auth_store.get_email(owner_id) if creds is not None else None
    return {"connected": creds is not None, "email": email}


@router.post("/auth/google/disconnect")
async def google_disconnect(
    owner_id: str = Depends(get_owner_id),
    google_auth_store: Optional[GoogleAuthStore] = Depends(get_google_auth_store),
) -> dict:
    """Delete the owner's stored credentials."""
    if not google_auth_store:
        raise HTTPException(status_code=500, detail="Auth store not initialized")

    await google_auth_store.delete_credentials(owner_id)
    return {"status": "disconnected"}
