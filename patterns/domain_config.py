"""Dataclass-based discount configuration.

Each discount function defines its merchant configuration as a frozen
dataclass parsed once from the metafield JSON string. This gives you:
- Type safety (no dynamic field access inside the rules)
- Default values (an absent or broken document is the all-defaults config)
- Immutability (frozen=True, the config outlives nothing but one evaluation)
- Per-field validation (one bad field falls back alone)

Wire keys are the ones the admin authoring form writes.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Optional

from core.integrations.normalizer import (
    to_bool,
    to_decimal,
    to_int,
    to_optional_str,
    to_str_list,
)

logger = logging.getLogger(__name__)

METAFIELD_NAMESPACE = "$app:volume-discount"
METAFIELD_KEY = "function-configuration"


# ---------------------------------------------------------------------------
# Document parsing
# ---------------------------------------------------------------------------

def load_document(raw: Optional[str]) -> dict[str, Any]:
    """Decode the metafield JSON; anything but a JSON object becomes {}."""
    if not raw:
        return {}
    try:
        document = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Configuration metafield is not valid JSON, using defaults")
        return {}
    if not isinstance(document, dict):
        logger.warning("Configuration metafield is not a JSON object, using defaults")
        return {}
    return document


def _field(document: dict[str, Any], key: str, convert: Callable[[Any], Any], default: Any) -> Any:
    if key not in document or document[key] is None:
        return default
    try:
        return convert(document[key])
    except (ValueError, TypeError):
        logger.warning("Invalid configuration field %s=%r, using default", key, document[key])
        return default


# ---------------------------------------------------------------------------
# Nested config sections
# ---------------------------------------------------------------------------

class QuantityBoundMode(str, Enum):
    """Which quantity bound(s) a line must satisfy."""

    MINIMUM = "minimum"
    MAXIMUM = "maximum"
    BOTH = "both"


def _to_quantity_mode(value: Any) -> QuantityBoundMode:
    return QuantityBoundMode(str(value).strip().lower())


@dataclass(frozen=True)
class QuantityBounds:
    """Inclusive quantity range applied per cart line."""

    active: bool = False
    mode: Optional[QuantityBoundMode] = None  # unset while active fails closed
    minimum: int = 0
    maximum: int = 0

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "QuantityBounds":
        return cls(
            active=_field(document, "optionQuantity", to_bool, False),
            mode=_field(document, "subOptionQuantity", _to_quantity_mode, None),
            minimum=_field(document, "minimumQuantity", to_int, 0),
            maximum=_field(document, "maximumQuantity", to_int, 0),
        )


@dataclass(frozen=True)
class DiscountValueConfig:
    """What value a qualifying discount carries."""

    percentage: Decimal = Decimal("0")
    use_fixed_amount: bool = False
    fixed_amount: Decimal = Decimal("0")
    message: Optional[str] = None

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "DiscountValueConfig":
        percentage = _field(document, "percentage", to_decimal, Decimal("0"))
        # Documents from the authoring form keep the fixed amount in "percentage".
        fixed_amount = _field(document, "fixedAmount", to_decimal, percentage)
        discount_type = _field(document, "optionDiscount", to_decimal, Decimal("0"))
        return cls(
            percentage=percentage,
            use_fixed_amount=discount_type != 0,
            fixed_amount=fixed_amount,
            message=_field(document, "message", to_optional_str, None),
        )


# ---------------------------------------------------------------------------
# Volume discount config
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class VolumeDiscountConfig:
    """Configuration for the vendor/quantity volume discount.

    Usage::

        config = VolumeDiscountConfig.from_metafield(raw_json)
        if config.include_vendors and line.vendor in config.vendors:
            ...
    """

    value: DiscountValueConfig = field(default_factory=DiscountValueConfig)
    vendors: frozenset[str] = frozenset()
    include_vendors: bool = False  # False: vendors is a block-list
    quantity: QuantityBounds = field(default_factory=QuantityBounds)

    @classmethod
    def default(cls) -> "VolumeDiscountConfig":
        """Create config with all defaults."""
        return cls()

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "VolumeDiscountConfig":
        return cls(
            value=DiscountValueConfig.from_document(document),
            vendors=frozenset(_field(document, "vendors", to_str_list, [])),
            include_vendors=_field(document, "option", to_bool, False),
            quantity=QuantityBounds.from_document(document),
        )

    @classmethod
    def from_metafield(cls, raw: Optional[str]) -> "VolumeDiscountConfig":
        return cls.from_document(load_document(raw))


# ---------------------------------------------------------------------------
# Tiered discount config
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Tier:
    """Percentage unlocked once the subtotal reaches the threshold."""

    threshold: Decimal
    percentage: Decimal


def _parse_tiers(document: dict[str, Any]) -> tuple[Tier, ...]:
    thresholds = document.get("tiersDiscount")
    percentages = document.get("percentagesDiscount")
    if not isinstance(thresholds, list) or not isinstance(percentages, list):
        return ()
    if len(thresholds) != len(percentages):
        logger.warning(
            "tiersDiscount has %d entries but percentagesDiscount has %d, extra entries ignored",
            len(thresholds), len(percentages),
        )

    tiers = []
    for index, (threshold, percentage) in enumerate(zip(thresholds, percentages)):
        try:
            tiers.append(Tier(threshold=to_decimal(threshold), percentage=to_decimal(percentage)))
        except ValueError:
            logger.warning("Dropping tier %d with invalid values (%r, %r)", index, threshold, percentage)
    return tuple(tiers)


@dataclass(frozen=True)
class TiersDiscountConfig:
    """Configuration for the subtotal tiers discount.

    Tiers keep the order the merchant entered them in; resolution depends
    on that order.
    """

    tiers: tuple[Tier, ...] = ()
    message: Optional[str] = None

    @property
    def tier_thresholds(self) -> tuple[Decimal, ...]:
        return tuple(t.threshold for t in self.tiers)

    @property
    def tier_percentages(self) -> tuple[Decimal, ...]:
        return tuple(t.percentage for t in self.tiers)

    @classmethod
    def default(cls) -> "TiersDiscountConfig":
        """Create config with all defaults."""
        return cls()

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "TiersDiscountConfig":
        return cls(
            tiers=_parse_tiers(document),
            message=_field(document, "message", to_optional_str, None),
        )

    @classmethod
    def from_metafield(cls, raw: Optional[str]) -> "TiersDiscountConfig":
        return cls.from_document(load_document(raw))


# ---------------------------------------------------------------------------
# Runtime settings
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FunctionSettings:
    """Process-level settings for running discount functions."""

    metafield_namespace: str = METAFIELD_NAMESPACE
    metafield_key: str = METAFIELD_KEY
    log_level: str = "WARNING"
    otel_endpoint: Optional[str] = None

    @classmethod
    def default(cls) -> "FunctionSettings":
        """Create settings with all defaults."""
        return cls()

    @classmethod
    def from_env(cls, prefix: str = "DISCOUNT_FUNCTIONS_") -> "FunctionSettings":
        """Create settings from environment variables.

        Example: DISCOUNT_FUNCTIONS_LOG_LEVEL=DEBUG
        """
        overrides = {}
        for name in ("metafield_namespace", "metafield_key", "log_level", "otel_endpoint"):
            value = os.getenv(f"{prefix}{name.upper()}")
            if value:
                overrides[name] = value

        return cls(**overrides)
