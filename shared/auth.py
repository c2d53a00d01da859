"""
JWT validation and user extraction utilities for Supabase Auth.
Supports both HS256 (legacy) and ES256 (JWKS) token verification.
"""

import os
import base64
import jwt
from jwt import PyJWKClient
import logging
from typing import Optional

from .errors import UnauthenticatedError

logger = logging.getLogger(__name__)

# Cache the JWKS client to avoid repeated fetches
_jwks_client: Optional[PyJWKClient] = None


def get_supabase_url() -> str:
    """Get the Supabase URL from environment variables."""
    url = os.environ.get("SUPABASE_URL")
    if not url:
        raise ValueError("SUPABASE_URL environment variable not set")
    return url.rstrip('/')


def get_jwt_secret() -> bytes:
    """
    Get the legacy HS256 secret, decoding it when it is base64-encoded.
    """
    secret = os.environ.get("SUPABASE_JWT_SECRET")
    if not secret:
        raise ValueError("SUPABASE_JWT_SECRET not set for HS256 verification")

    if secret.endswith('='):
        try:
            return base64.b64decode(secret)
        except ValueError:
            pass
    return secret.encode('utf-8')


def get_jwks_client() -> PyJWKClient:
    """
    Get or create the JWKS client for Supabase token verification.
    Uses the Supabase JWKS endpoint for ES256 token verification.
    """
    global _jwks_client
    if _jwks_client is None:
        jwks_url = f"{get_supabase_url()}/auth/v1/.well-known/jwks.json"
        logger.info(f"Initializing JWKS client with URL: {jwks_url}")
        _jwks_client = PyJWKClient(jwks_url, cache_keys=True)
    return _jwks_client


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token part of a ``Bearer`` Authorization header."""
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthenticatedError("Missing or invalid Authorization header")

    token = authorization[7:].strip()
    if not token:
        raise UnauthenticatedError("Missing or invalid Authorization header")
    return token


def get_user_from_authorization(authorization: Optional[str]) -> dict:
    """
    Validate the identity token from an Authorization header value.

    Args:
        authorization: Raw header value, e.g. ``"Bearer eyJ..."``

    Returns:
        dict with user info: {"id": str, "email": str, "role": str}

    Raises:
        UnauthenticatedError: If token is missing, expired, or invalid
    """
    token = extract_bearer_token(authorization)

    try:
        try:
            token_alg = jwt.get_unverified_header(token).get('alg')
        except jwt.exceptions.DecodeError as e:
            logger.warning(f"Could not read token header: {e}")
            raise UnauthenticatedError("Invalid token format")

        if token_alg == "ES256":
            payload = _verify_es256_token(token)
        elif token_alg == "HS256":
            payload = _verify_hs256_token(token)
        else:
            logger.warning(f"Unsupported algorithm: {token_alg}")
            raise UnauthenticatedError(f"Unsupported token algorithm: {token_alg}")

        return {
            "id": payload["sub"],
            "email": payload.get("email"),
            "role": payload.get("role", "authenticated")
        }

    except UnauthenticatedError:
        raise
    except jwt.ExpiredSignatureError:
        logger.warning("Token expired")
        raise UnauthenticatedError("Token expired")
    except jwt.InvalidAudienceError:
        logger.warning("Invalid audience in token")
        raise UnauthenticatedError("Invalid token audience")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise UnauthenticatedError("Invalid token")
    except Exception as e:
        logger.error(f"Token verification error: {str(e)}")
        raise UnauthenticatedError("Token verification failed")


def _verify_es256_token(token: str) -> dict:
    """Verify an ES256 token using JWKS."""
    signing_key = get_jwks_client().get_signing_key_from_jwt(token)

    return jwt.decode(
        token,
        signing_key.key,
        algorithms=["ES256"],
        audience="authenticated",
        options={"require": ["sub", "exp", "aud"]}
    )


def _verify_hs256_token(token: str) -> dict:
    """Verify an HS256 token using the static JWT secret (legacy)."""
    return jwt.decode(
        token,
        get_jwt_secret(),
        algorithms=["HS256"],
        audience="authenticated",
        options={"require": ["sub", "exp", "aud"]}
    )
