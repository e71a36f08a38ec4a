"""Hallucheck HTTP API."""
