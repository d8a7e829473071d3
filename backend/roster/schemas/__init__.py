"""API Schemas - Pydantic models for request validation and response shaping."""
