"""Utility functions for geometry and image handling."""
