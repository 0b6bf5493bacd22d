"""Reusable patterns the discount vertical is built from.

Each module is a self-contained pattern: a pure-function rules engine,
a shop-scoped async repository layer, and frozen dataclass configuration.
"""
