"""Runtime configuration model for Shrike.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_SIG_FIGS,
    DEFAULT_SURROGATE_KEY_STRATEGY,
    SUPPORTED_SURROGATE_KEY_STRATEGIES,
)
from core.errors import ShrikeConfigError


@dataclass(frozen=True)
class ShrikeConfig:
    """Validated runtime configuration.

    Attributes:
        sig_figs: Decimal places kept for coordinates and precision.
        surrogate_keys: Surrogate key strategy, ``random`` or ``hashed``.
        s3_region: Optional default AWS region for S3 operations.
        s3_profile: Optional AWS profile for boto3 session initialization.
    """

    sig_figs: int = DEFAULT_SIG_FIGS
    surrogate_keys: str = DEFAULT_SURROGATE_KEY_STRATEGY
    s3_region: str | None = None
    s3_profile: str | None = None

    @classmethod
    def from_env(cls) -> "ShrikeConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ShrikeConfigError: If environment values are invalid.
        """
        sig_figs = parse_sig_figs(os.getenv("SHRIKE_SIG_FIGS", str(DEFAULT_SIG_FIGS)))
        surrogate_keys = parse_surrogate_keys(
            os.getenv("SHRIKE_SURROGATE_KEYS", DEFAULT_SURROGATE_KEY_STRATEGY)
        )
        return cls(
            sig_figs=sig_figs,
            surrogate_keys=surrogate_keys,
            s3_region=os.getenv("SHRIKE_S3_REGION"),
            s3_profile=os.getenv("SHRIKE_S3_PROFILE"),
        )


def parse_sig_figs(raw_value: str) -> int:
    """Parse the decimal places setting.

    Args:
        raw_value: Raw string from environment or CLI.

    Returns:
        Parsed non-negative integer.

    Raises:
        ShrikeConfigError: If value is not a non-negative integer.
    """
    try:
        sig_figs = int(raw_value)
    except ValueError as error:
        raise ShrikeConfigError(
            "Invalid SHRIKE_SIG_FIGS value: "
            f"expected integer, got '{raw_value}'. "
            "Set SHRIKE_SIG_FIGS to a numeric value."
        ) from error
    if sig_figs < 0:
        raise ShrikeConfigError(
            f"Invalid SHRIKE_SIG_FIGS value {sig_figs}: expected value >= 0."
        )
    return sig_figs


def parse_surrogate_keys(raw_value: str) -> str:
    """Parse the surrogate key strategy setting.

    Args:
        raw_value: Raw string from environment or CLI.

    Returns:
        Normalized strategy name.

    Raises:
        ShrikeConfigError: If the strategy is unknown.
    """
    strategy = raw_value.strip().lower()
    if strategy not in SUPPORTED_SURROGATE_KEY_STRATEGIES:
        supported = ", ".join(SUPPORTED_SURROGATE_KEY_STRATEGIES)
        raise ShrikeConfigError(
            f"Invalid SHRIKE_SURROGATE_KEYS value '{raw_value}'. Use one of: {supported}."
        )
    return strategy
