"""Reusable patterns shared by every discount function.

Each module is a self-contained piece the functions compose: pure rules,
the evaluation state machine, and dataclass configuration.
"""
