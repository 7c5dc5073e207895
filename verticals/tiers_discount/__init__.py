"""Tiers discount — subtotal tiers on the whole order.

Discounts the order subtotal by the percentage of the last configured tier
whose threshold the subtotal reaches, for buyers allowed discounts.
"""
