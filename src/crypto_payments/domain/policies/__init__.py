"""Domain policies - Pure business rules parameterised by configuration."""

from crypto_payments.domain.policies.confirmation_policy import (
    CANONICAL_TIERS,
    DEFAULT_CONFIRMATION_POLICY,
    ConfirmationPolicy,
    ConfirmationTier,
    RiskLevel,
    estimate_confirmation_time,
    is_expired,
    is_high_value,
    parse_tiers,
    required_confirmations,
    risk_level,
)

__all__ = [
    "CANONICAL_TIERS",
    "DEFAULT_CONFIRMATION_POLICY",
    "ConfirmationPolicy",
    "ConfirmationTier",
    "RiskLevel",
    "estimate_confirmation_time",
    "is_expired",
    "is_high_value",
    "parse_tiers",
    "required_confirmations",
    "risk_level",
]
