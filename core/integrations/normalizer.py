"""
Function Input Normalizer — Platform Input to Cart Snapshot.

Maps the platform's camelCase function input document to the canonical
CartSnapshot. Supports nested field access, total transform functions, and
per-entity mapping configurations. A missing field or a failing transform
yields the field default; normalization never raises on input data.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional
import logging

from core.models.cart import CartLine, CartSnapshot, MerchandiseKind

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Field mapping
# ---------------------------------------------------------------------------

@dataclass
class FieldMapping:
    """Maps a source input field to a canonical target field."""
    source_field: str       # Dot-notation path, e.g. "merchandise.product.vendor"
    target_field: str       # Canonical field name, e.g. "vendor"
    transform: str | None = None  # Optional transform name
    default: Any = None     # Default if source is missing


@dataclass
class SchemaMapping:
    """Complete mapping config for one entity type."""
    entity_type: str  # input | cart_line
    mappings: list[FieldMapping] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Transform functions
# ---------------------------------------------------------------------------

# Largest decimal exponent and digit count accepted for any numeric input.
# Quantities, percentages and money amounts never come close; anything
# bigger would make int() or plain-notation rendering unbounded.
MAX_EXPONENT = 18
MAX_DIGITS = 34


def to_decimal(value: Any) -> Decimal:
    """Parse a decimal, raising ValueError for anything non-finite, non-numeric or out of range."""
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Not a number: {value!r}")
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Not a number: {value!r}") from exc
    if not parsed.is_finite():
        raise ValueError(f"Not a finite number: {value!r}")
    if parsed.is_zero():
        return Decimal(0)
    if abs(parsed.adjusted()) > MAX_EXPONENT or len(parsed.as_tuple().digits) > MAX_DIGITS:
        raise ValueError(f"Number out of range: {str(value)[:40]!r}")
    return parsed


def to_int(value: Any) -> int:
    """Parse an integer; integral decimals like "2.0" are accepted, fractions truncate."""
    return int(to_decimal(value))


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return False


def to_str_list(value: Any) -> list[str]:
    """A list of non-empty strings; a bare string becomes a one-item list."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"Not a list: {value!r}")
    return [s for s in (str(v) for v in value if v is not None) if s]


def to_optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text or None


def to_merchandise_kind(value: Any) -> MerchandiseKind:
    if value == MerchandiseKind.PRODUCT_VARIANT.value:
        return MerchandiseKind.PRODUCT_VARIANT
    return MerchandiseKind.OTHER


TRANSFORMS: dict[str, Callable[[Any], Any]] = {
    "decimal": to_decimal,
    "int": to_int,
    "bool": to_bool,
    "str": lambda v: str(v) if v is not None else "",
    "optional_str": to_optional_str,
    "str_list": to_str_list,
    "merchandise_kind": to_merchandise_kind,
}


# ---------------------------------------------------------------------------
# InputNormalizer
# ---------------------------------------------------------------------------

class InputNormalizer:
    """Normalizes function input documents using registered mappings."""

    def __init__(self):
        self._mappings: dict[str, SchemaMapping] = {}

    def register_mapping(self, mapping: SchemaMapping) -> None:
        """Register a schema mapping for an entity type."""
        self._mappings[mapping.entity_type] = mapping

    def normalize(self, entity_type: str, raw_data: Any) -> dict[str, Any]:
        """
        Normalize raw input data to canonical field names.

        Returns a dict with mapped fields; unknown entity types and
        non-object input produce an empty dict.
        """
        mapping = self._mappings.get(entity_type)
        if not mapping or not isinstance(raw_data, dict):
            return {}

        result: dict[str, Any] = {}
        for fm in mapping.mappings:
            value = self._get_nested(raw_data, fm.source_field)
            if value is None:
                value = fm.default

            if fm.transform and fm.transform in TRANSFORMS:
                try:
                    value = TRANSFORMS[fm.transform](value)
                except (ValueError, TypeError, KeyError):
                    if value is not fm.default:
                        logger.warning(
                            "Invalid %s value %r for %s, using default",
                            entity_type, value, fm.source_field,
                        )
                    value = fm.default

            result[fm.target_field] = value

        return result

    def normalize_line(self, raw_line: Any) -> CartLine:
        """Shorthand: normalize and return a CartLine."""
        data = self.normalize("cart_line", raw_line)
        if data.get("merchandise_kind") is not MerchandiseKind.PRODUCT_VARIANT:
            data["vendor"] = None
        return CartLine(**{k: v for k, v in data.items() if k in CartLine.model_fields})

    def normalize_cart(self, raw_input: Any) -> CartSnapshot:
        """Shorthand: normalize the whole input document to a CartSnapshot."""
        data = self.normalize("input", raw_input)
        raw_lines = data.pop("lines", None)
        if not isinstance(raw_lines, list):
            raw_lines = []
        lines = tuple(self.normalize_line(line) for line in raw_lines)
        return CartSnapshot(
            lines=lines,
            **{k: v for k, v in data.items() if k in CartSnapshot.model_fields},
        )

    def metafield_value(self, raw_input: Any) -> Optional[str]:
        """The configuration metafield's raw JSON string, if any."""
        return self.normalize("input", raw_input).get("configuration")

    @staticmethod
    def _get_nested(data: dict[str, Any], path: str) -> Any:
        """Access nested dict values via dot notation (e.g. 'cart.cost.subtotalAmount')."""
        parts = path.split(".")
        current = data
        for part in parts:
            if isinstance(current, dict):
                current = current.get(part)
            else:
                return None
            if current is None:
                return None
        return current


# ---------------------------------------------------------------------------
# Pre-built mappings for the platform's function input
# ---------------------------------------------------------------------------

FUNCTION_INPUT_MAPPING = SchemaMapping(
    entity_type="input",
    mappings=[
        FieldMapping("discountNode.metafield.value", "configuration", "optional_str"),
        FieldMapping("cart.lines", "lines"),
        FieldMapping("cart.cost.subtotalAmount.amount", "subtotal", "decimal", Decimal("0")),
        FieldMapping("cart.buyerIdentity.customer.allowDiscount", "buyer_discount_eligible", "bool", False),
    ],
)

CART_LINE_MAPPING = SchemaMapping(
    entity_type="cart_line",
    mappings=[
        FieldMapping("quantity", "quantity", "int", 0),
        FieldMapping("merchandise.__typename", "merchandise_kind", "merchandise_kind"),
        FieldMapping("merchandise.id", "variant_id", "optional_str"),
        FieldMapping("merchandise.product.vendor", "vendor", "optional_str"),
    ],
)


def default_normalizer() -> InputNormalizer:
    """An InputNormalizer with the platform input mappings registered."""
    normalizer = InputNormalizer()
    normalizer.register_mapping(FUNCTION_INPUT_MAPPING)
    normalizer.register_mapping(CART_LINE_MAPPING)
    return normalizer
