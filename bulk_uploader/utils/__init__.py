"""Shared helpers for bulk_uploader."""
