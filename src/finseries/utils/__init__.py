"""Utility helpers for finseries."""

from .signature import compute_signature

__all__ = ["compute_signature"]
