"""Voyana core - provider-independent flight schemas."""
