from app.metadata.base import BaseMetadataProvider
from app.metadata.factory import MetadataGeneratorFactory
from app.metadata.generator import MetadataGenerator
from app.metadata.local_analyzer import LOCAL_GENERATOR_NAME, LocalMetadataAnalyzer
from app.metadata.models import AIMetadata, DocumentMetadata

__all__ = [
    "LOCAL_GENERATOR_NAME",
    "AIMetadata",
    "BaseMetadataProvider",
    "DocumentMetadata",
    "LocalMetadataAnalyzer",
    "MetadataGenerator",
    "MetadataGeneratorFactory",
]
