"""Voyana flight search: provider adapters, merge pipeline and CLI."""
