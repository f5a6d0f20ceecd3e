from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class AIMetadata:
    """The four fields every metadata source must produce."""

    title: str
    description: str
    tags: list[str] = field(default_factory=list)
    category: str = "other"


@dataclass
class DocumentMetadata:
    """Generated metadata enriched with local text statistics and provenance."""

    title: str
    description: str
    tags: list[str]
    category: str
    page_count: int
    word_count: int
    character_count: int
    language: str
    themes: list[str]
    summary: str
    document_type: str
    readability_score: int
    generated_by: str
    processed_at: str

    def to_record(self) -> dict[str, Any]:
        """JSON-ready form stored in the document's metadata bag."""
        return {
            "title": self.title,
            "description": self.description,
            "tags": list(self.tags),
            "category": self.category,
            "pageCount": self.page_count,
            "wordCount": self.word_count,
            "characterCount": self.character_count,
            "language": self.language,
            "keyThemes": list(self.themes),
            "summary": self.summary,
            "documentType": self.document_type,
            "readabilityScore": self.readability_score,
            "generatedBy": self.generated_by,
            "processedAt": self.processed_at,
        }
