"""Centralized configuration for RunHare."""

import os
import warnings


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """
    RunHare configuration with environment variable overrides.

    All configuration values are centralized here with sensible defaults.
    Values can be overridden via environment variables.
    """

    @staticmethod
    def _parse_int(name: str, default: str) -> int:
        """Parse an integer environment variable."""
        raw = os.getenv(name, default)
        try:
            return int(raw)
        except ValueError as e:
            raise ValueError(f"Invalid {name} environment variable: {e}")

    # ========================================================================
    # Service Endpoint
    # ========================================================================
    BASE_URL: str = os.getenv("RUNHARE_BASE_URL", "https://harex.in")
    HTTP_TIMEOUT: float = float(os.getenv("RUNHARE_HTTP_TIMEOUT", "10"))
    HTTP_CONNECT_TIMEOUT: float = float(os.getenv("RUNHARE_HTTP_CONNECT_TIMEOUT", "5"))

    # ========================================================================
    # Producer Identity
    # ========================================================================
    NAMESPACE: str = os.getenv("RUNHARE_NAMESPACE", "")
    ORIGIN: str = os.getenv("RUNHARE_ORIGIN", "")

    # ========================================================================
    # Signing
    # ========================================================================
    SECRET: str = os.getenv("RUNHARE_SECRET", "")
    TTL_MS: int = _parse_int.__func__("RUNHARE_TTL_MS", "2000")
    MIN_SECRET_LENGTH: int = 32

    # ========================================================================
    # Consumer Policy
    # ========================================================================
    REJECT_UNREGISTERED_MESSAGES: bool = _parse_bool(
        os.getenv("RUNHARE_REJECT_UNREGISTERED", "false")
    )

    @classmethod
    def validate(cls) -> bool:
        """
        Validate configuration consistency.

        Checks:
        - SECRET is set (warning if empty or short)
        - TTL_MS and HTTP timeouts are > 0
        - BASE_URL uses http(s)

        Returns:
            True if validation passes

        Raises:
            ValueError: If validation fails
        """
        errors = []

        is_production = os.getenv("ENVIRONMENT", "").lower() == "production"

        if not cls.SECRET:
            if is_production:
                errors.append(
                    "RUNHARE_SECRET must be set in production. "
                    "An empty secret signs with a fixed, guessable key."
                )
            else:
                warnings.warn(
                    "RUNHARE_SECRET not set - payloads are signed with an empty key. "
                    "Set RUNHARE_SECRET for real deployments."
                )
        elif len(cls.SECRET) < cls.MIN_SECRET_LENGTH:
            warnings.warn(
                f"RUNHARE_SECRET is only {len(cls.SECRET)} characters. "
                f"For security, use at least {cls.MIN_SECRET_LENGTH} characters."
            )

        if cls.TTL_MS <= 0:
            errors.append(f"TTL_MS must be > 0, got {cls.TTL_MS}")

        if cls.HTTP_TIMEOUT <= 0:
            errors.append(f"HTTP_TIMEOUT must be > 0, got {cls.HTTP_TIMEOUT}")
        if cls.HTTP_CONNECT_TIMEOUT <= 0:
            errors.append(
                f"HTTP_CONNECT_TIMEOUT must be > 0, got {cls.HTTP_CONNECT_TIMEOUT}"
            )

        if not cls.BASE_URL.startswith(("http://", "https://")):
            errors.append(f"BASE_URL must be an http(s) URL, got {cls.BASE_URL!r}")

        if errors:
            raise ValueError(f"Config validation failed: {'; '.join(errors)}")

        return True
