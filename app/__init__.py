"""Elevatr notification service."""
