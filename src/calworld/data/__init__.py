"""Packaged data tables."""
