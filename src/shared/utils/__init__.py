"""
Utilities Package

Common utility functions and helpers.

Contents:
=========
- security: Password hashing and JWT management

Usage:
======
    from src.shared.utils.security import SecurityUtils
"""

from src.shared.utils.security import SecurityUtils, BCRYPT_ROUNDS

__all__ = [
    "SecurityUtils",
    "BCRYPT_ROUNDS",
]
