"""Core - error taxonomy and store contracts. No IO, no framework imports."""
