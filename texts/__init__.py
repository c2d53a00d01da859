"""Texts owned by a workspace."""
