"""Bundled game data files."""
