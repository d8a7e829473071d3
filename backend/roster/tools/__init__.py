"""Operational scripts run outside the web process."""
