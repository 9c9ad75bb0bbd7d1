"""Operational scripts for the ventboard application."""
