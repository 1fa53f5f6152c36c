"""Splitting event streams into chapters."""
