"""
Adapters Package

External service integrations.

Contents:
=========
- storage_adapter: Asset store for avatars and cover images (local disk, S3)

Note: Database access is handled by shared/db/session.py using async SQLAlchemy.

Usage:
======
    from src.shared.adapters.storage_adapter import build_storage_adapter, UploadedAsset
"""
