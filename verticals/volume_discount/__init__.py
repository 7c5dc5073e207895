"""Volume discount — vendor and quantity based line discounts.

Discounts individual cart lines:
- Vendor allow-list or block-list
- Optional per-line quantity bounds (minimum, maximum or both)
- Percentage or fixed amount value
"""
