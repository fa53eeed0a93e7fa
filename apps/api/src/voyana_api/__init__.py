"""Voyana HTTP API."""
