"""Utility helpers for uelog."""
