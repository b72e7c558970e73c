"""Application ports (Protocols) implemented by infrastructure."""

from portal.application.interfaces.repositories import (
    ICourseRepository,
    IDirectoryRepository,
    IResourceRepository,
)
from portal.application.interfaces.services import IIdentityProvider

__all__ = [
    "ICourseRepository",
    "IDirectoryRepository",
    "IIdentityProvider",
    "IResourceRepository",
]
