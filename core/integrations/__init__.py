"""
Core Integrations — Platform Input Adapters.

Provides the boundary between the checkout platform and the engine:
- InputNormalizer: platform input document → CartSnapshot
- TRANSFORMS: total field converters shared with configuration parsing
"""
from core.integrations.normalizer import (
    CART_LINE_MAPPING,
    FUNCTION_INPUT_MAPPING,
    FieldMapping,
    InputNormalizer,
    SchemaMapping,
    TRANSFORMS,
    default_normalizer,
    to_bool,
    to_decimal,
    to_int,
    to_optional_str,
    to_str_list,
)

__all__ = [
    "CART_LINE_MAPPING",
    "FUNCTION_INPUT_MAPPING",
    "FieldMapping",
    "InputNormalizer",
    "SchemaMapping",
    "TRANSFORMS",
    "default_normalizer",
    "to_bool",
    "to_decimal",
    "to_int",
    "to_optional_str",
    "to_str_list",
]
