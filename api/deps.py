import hmac
from typing import Optional

from fastapi import Cookie, Depends, HTTPException

from config import Settings, get_settings
from services.relay_client import RelayClient
from services.relay_config import RelayConfig, get_relay_config

ADMIN_COOKIE = "admin_token"


def require_admin(
    admin_token: Optional[str] = Cookie(None),
    s: Settings = Depends(get_settings),
) -> None:
    """Gate for admin routes: the admin_token cookie must equal ADMIN_TOKEN."""
    expected = s.admin_token
    # With no secret configured, everything stays locked
    if not expected:
        raise HTTPException(status_code=401, detail="ADMIN_TOKEN not configured")
    if not admin_token or not hmac.compare_digest(admin_token.encode("utf-8"), expected.encode("utf-8")):
        raise HTTPException(status_code=401, detail="Unauthorized")


def get_relay_client(config: RelayConfig = Depends(get_relay_config)) -> RelayClient:
    return RelayClient(config)
