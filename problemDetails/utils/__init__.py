"""Shared helpers for the problemDetails package."""
