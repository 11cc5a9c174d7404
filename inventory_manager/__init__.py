"""Inventory manager: a household entity graph with tags, clipboard and laundry tracking."""

__version__ = "0.1.0"
