"""Dishka."""
