"""Helpers for Xcode projects: targets, versions, device lists, teams and templates."""

__version__ = "0.1.0"