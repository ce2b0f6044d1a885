"""Bundled randomness test plugins."""
