"""Destinations for downloaded drive content."""
