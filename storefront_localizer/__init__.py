"""Storefront content localization: multi-provider translation with memory and review."""

__version__ = "0.1.0"
