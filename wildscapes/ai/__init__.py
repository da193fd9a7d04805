"""Automated players."""

from .random_ai import RandomAI

__all__ = ["RandomAI"]
