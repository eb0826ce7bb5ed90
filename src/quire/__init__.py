"""Quire - personal diary client with autosaving editor sessions."""
