"""Notification and user management service."""
