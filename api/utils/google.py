"""
Google sign-in: verifies the ID token the web client obtained from Google.

The token is an RS256 JWT signed with one of Google's published keys; the
key set is fetched once and cached for GOOGLE_CERTS_TTL_SECONDS.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

import httpx
from fastapi import HTTPException, status
from jose import JWTError, jwt

from api.config import get_settings
from api.utils.logger import get_logger

logger = get_logger(__name__)

GOOGLE_CERTS_URL = "https://www.googleapis.com/oauth2/v3/certs"
GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")
GOOGLE_CERTS_TTL_SECONDS = 3600

_certs_cache: dict = {"keys": None, "fetched_at": 0.0}


@dataclass(frozen=True)
class GoogleIdentity:
    """Decoded Google identity fields required by local auth."""

    subject: str
    email: str
    name: str | None = None


def _google_signing_keys() -> dict:
    now = time.monotonic()
    if _certs_cache["keys"] is None or now - _certs_cache["fetched_at"] > GOOGLE_CERTS_TTL_SECONDS:
        try:
            response = httpx.get(GOOGLE_CERTS_URL, timeout=5.0)
            response.raise_for_status()
        except httpx.HTTPError:
            logger.exception("could not fetch Google signing keys")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Google sign-in is temporarily unavailable",
            )
        _certs_cache["keys"] = response.json()
        _certs_cache["fetched_at"] = now
    return _certs_cache["keys"]


def verify_google_id_token(token: str) -> GoogleIdentity:
    """Check signature, audience, issuer and expiry of a Google ID token and return its identity."""
    client_id = get_settings().google_client_id
    if not client_id:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Google sign-in is not configured")

    try:
        claims = jwt.decode(
            token,
            _google_signing_keys(),
            algorithms=["RS256"],
            audience=client_id,
            options={"verify_at_hash": False},
        )
    except JWTError as error:
        logger.info("google token rejected: %s", error)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid Google token") from error

    if claims.get("iss") not in GOOGLE_ISSUERS:
        logger.info("google token rejected: issuer=%s", claims.get("iss"))
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid Google token")

    email = claims.get("email")
    subject = claims.get("sub")
    if not isinstance(email, str) or not email or not isinstance(subject, str):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Google did not provide an email address")

    return GoogleIdentity(subject=subject, email=email, name=claims.get("name"))
