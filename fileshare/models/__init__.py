"""
API schemas.

Pydantic request/response models for every view.
"""
