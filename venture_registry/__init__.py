"""Venture registry API."""
