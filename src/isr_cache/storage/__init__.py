from isr_cache.storage.base_storage import BaseArtifactStorage
from isr_cache.storage.local_storage import LocalArtifactStorage, MappedArtifact
from isr_cache.storage.models import ArtifactInfo

__all__ = ["ArtifactInfo", "BaseArtifactStorage", "LocalArtifactStorage", "MappedArtifact"]
