import base64
import logging
import secrets

from fastapi import Depends, Request

from pdf_processor.config import Settings, get_settings
from pdf_processor.exceptions import (
    BASIC_CHALLENGE,
    AuthenticationRequired,
    InvalidCredential,
    MissingOrMalformedHeader,
    ServerMisconfigured,
)

logger = logging.getLogger(__name__)


def _matches(provided: str, expected: str) -> bool:
    return secrets.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


async def verify_api_key(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Guards programmatic endpoints with ``Authorization: Bearer <API_KEY>``.

    Raises:
        ServerMisconfigured: 500 if no API key is configured.
        MissingOrMalformedHeader: 401 if the header is absent or not a Bearer header.
        InvalidCredential: 403 if the token does not match.
    """
    expected = settings.api_key
    if not expected:
        logger.error("API_KEY is not configured; rejecting %s", request.url.path)
        raise ServerMisconfigured("Server configuration error: API_KEY not set")

    auth_header = request.headers.get("authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        logger.warning("Bearer authorization header missing or malformed")
        raise MissingOrMalformedHeader()

    if not _matches(auth_header[len("Bearer "):], expected):
        logger.warning("Invalid API key presented for %s", request.url.path)
        raise InvalidCredential()


async def verify_basic_auth(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """Guards the health and test endpoints with HTTP Basic credentials."""
    username = settings.basic_auth_username
    password = settings.basic_auth_password
    if not username or not password:
        logger.error("Basic auth credentials are not configured")
        raise ServerMisconfigured("Server configuration error: Basic auth credentials not set")

    auth_header = request.headers.get("authorization")
    if not auth_header or not auth_header.startswith("Basic "):
        raise AuthenticationRequired()

    try:
        decoded = base64.b64decode(auth_header[len("Basic "):], validate=True).decode("utf-8")
    except ValueError:
        # binascii.Error and UnicodeDecodeError are both ValueErrors
        decoded = ""

    # Passwords may contain ":"; usernames may not.
    provided_user, separator, provided_password = decoded.partition(":")
    user_ok = _matches(provided_user, username)
    password_ok = _matches(provided_password, password)
    if not separator or not (user_ok and password_ok):
        logger.warning("Invalid basic auth credentials for %s", request.url.path)
        raise InvalidCredential("Invalid credentials", status_code=401, headers=BASIC_CHALLENGE)
