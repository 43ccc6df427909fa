"""
Application layer.

Use-case orchestration over the boundary adapters.
"""
