"""Utility helpers shared by directory index strategies."""
