"""Shift staffing gap engine."""
