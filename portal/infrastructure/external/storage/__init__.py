"""Blob storage backends for uploaded files."""

from portal.infrastructure.external.storage.factory import StorageFactory
from portal.infrastructure.external.storage.protocol import StorageProtocol

__all__ = ["StorageFactory", "StorageProtocol"]
