"""Uploading images and articles to remote services."""
