"""Workspace membership and token bootstrap."""
