# hoaxify/auth/__init__.py
"""
Authentication modules for Hoaxify.

This package contains:
- identity.py: Canonical request identity (authenticated user or anonymous)
"""
from hoaxify.auth.identity import Identity

__all__ = ["Identity"]
