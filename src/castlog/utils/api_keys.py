"""API credential validation utilities.

Provides centralized validation for credentials read from environment
variables, catching configuration mistakes before any request is made.
"""

import os
import re
from typing import Literal

from castlog.utils.errors import APIKeyError

Provider = Literal["twitter", "youtube"]

# Where to go when a credential is missing.
CREDENTIAL_HELP = {
    "twitter": "https://developer.twitter.com/en/portal/dashboard",
    "youtube": "https://console.developers.google.com/apis/credentials",
}


def validate_api_key(key: str | None, provider: Provider, key_name: str) -> str:
    """Validate credential format and return the cleaned value.

    Args:
        key: The credential to validate (may be None)
        provider: The API provider name
        key_name: Environment variable name (for error messages)

    Returns:
        Validated and stripped credential

    Raises:
        APIKeyError: If the credential is missing, empty, or malformed

    Example:
        >>> token = validate_api_key(
        ...     os.environ.get("TWITTER_TOKEN"),
        ...     "twitter",
        ...     "TWITTER_TOKEN"
        ... )
    """
    if key is None or not key.strip():
        raise APIKeyError(
            f"No {key_name} is set in the environment.\n"
            f"If you need a {provider.title()} credential, visit {CREDENTIAL_HELP[provider]}"
        )

    # Check for common mistakes BEFORE stripping
    if (key.strip().startswith('"') and key.strip().endswith('"')) or (
        key.strip().startswith("'") and key.strip().endswith("'")
    ):
        raise APIKeyError(
            f"{provider.title()} credential should not be quoted.\n"
            f"Remove quotes from the {key_name} environment variable."
        )

    if any(char in key for char in ["\n", "\r", "\0", "\t"]):
        raise APIKeyError(
            f"{provider.title()} credential contains invalid characters.\n"
            f"Check your {key_name} environment variable."
        )

    key = key.strip()

    if len(key) < 20:
        raise APIKeyError(
            f"{provider.title()} credential appears invalid (too short).\n"
            f"Expected at least 20 characters, got {len(key)}.\n"
            f"Check your {key_name} environment variable."
        )

    if provider == "youtube":
        # Google API keys start with "AIza"
        if not re.match(r"^AIza[A-Za-z0-9_-]+$", key):
            raise APIKeyError(
                f"YouTube API key format appears invalid.\n"
                f"Google API keys typically start with 'AIza' and contain only "
                f"alphanumeric characters, underscores, and dashes.\n"
                f"Check your {key_name} environment variable."
            )

    return key


def get_validated_api_key(env_var: str, provider: Provider) -> str:
    """Get and validate a credential from the environment.

    Args:
        env_var: Environment variable name
        provider: API provider name

    Returns:
        Validated credential

    Raises:
        APIKeyError: If the credential is missing or invalid
    """
    return validate_api_key(os.environ.get(env_var), provider, env_var)
