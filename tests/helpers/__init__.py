"""Test helpers and stand-ins."""
