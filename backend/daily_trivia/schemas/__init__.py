"""Pydantic Schemas — request/response models for API boundaries."""
