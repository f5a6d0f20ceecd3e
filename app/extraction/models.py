from dataclasses import dataclass, field


@dataclass
class ExtractedContent:
    """Text pulled out of a document plus how it was obtained."""

    text: str
    extraction_method: str
    warnings: list[str] = field(default_factory=list)
