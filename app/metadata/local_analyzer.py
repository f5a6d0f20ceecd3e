"""Offline metadata heuristics.

Used in two ways: ``analyze`` builds the full metadata when every AI provider
failed, and ``enrich`` adds the text statistics (counts, language, themes,
summary, readability) to whatever an AI provider returned. Neither raises.
"""

import re
from collections import Counter
from datetime import datetime, timezone
from pathlib import PurePath

from app.metadata.categories import DEFAULT_CATEGORY
from app.metadata.models import AIMetadata, DocumentMetadata
from app.metadata.validator import normalize_tags
from app.pages.page_counter import estimate_page_count

LOCAL_GENERATOR_NAME = "smart-local-processor"

TITLE_MAX_CHARS = 80
DESCRIPTION_MAX_CHARS = 250
MAX_TAGS = 12
MAX_THEMES = 8

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n")
_NON_ALNUM = re.compile(r"[^a-z0-9]")
_TITLE_NOISE = re.compile(r"page|\d{1,2}/\d{1,2}|chapter|section", re.IGNORECASE)
_FRONT_MATTER = re.compile(r"^\s*(abstract|introduction|table of contents)", re.IGNORECASE)

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
        "with", "by", "as", "is", "are", "was", "were", "be", "been", "have", "has",
        "had", "do", "does", "did", "will", "would", "could", "should", "may",
        "might", "this", "that", "these", "those", "them", "then", "than", "from",
        "into", "using", "based", "within", "between", "through", "during",
        "before", "after", "above", "below", "upon", "about", "against", "among",
        "since", "until",
    }
)

CATEGORY_KEYWORDS: dict[str, tuple[tuple[str, ...], float]] = {
    "technology": (
        ("tech", "innovation", "gadget", "software", "hardware",
         "artificial intelligence", "computer", "internet", "digital", "future"),
        2,
    ),
    "business": (
        ("company", "startup", "entrepreneur", "management", "strategy",
         "leadership", "economy", "commerce", "industry", "executive"),
        2,
    ),
    "education": (
        ("learn", "teach", "school", "college", "student", "teacher",
         "curriculum", "classroom", "degree", "skill"),
        2,
    ),
    "health": (
        ("wellness", "fitness", "nutrition", "diet", "exercise", "mental",
         "physical", "doctor", "therapy", "wellbeing"),
        2,
    ),
    "science": (
        ("science", "discovery", "experiment", "theory", "research", "lab",
         "scientist", "fact", "universe", "knowledge"),
        2,
    ),
}

LANGUAGE_FUNCTION_WORDS: dict[str, tuple[str, ...]] = {
    "en": ("the", "and", "is", "in", "to", "of", "a", "that", "it", "with"),
    "es": ("el", "la", "de", "que", "y", "en", "un", "es", "se", "no"),
    "fr": ("le", "la", "de", "et", "à", "en", "un", "que", "est", "pour"),
    "de": ("der", "die", "das", "und", "in", "den", "von", "zu", "dem", "mit"),
    "it": ("il", "la", "di", "e", "che", "in", "un", "per", "sono", "con"),
}

SUMMARY_CUE_WORDS = ("conclusion", "summary", "important", "key", "primary", "main", "essential")


class LocalMetadataAnalyzer:
    """Deterministic, dependency-free metadata generation."""

    def analyze(self, content: str, filename: str, file_type: str) -> DocumentMetadata:
        """Full metadata from the text alone, tagged as locally generated."""
        title = self.title(content, filename, file_type)
        ai = AIMetadata(
            title=title,
            description=self.description(content),
            tags=self.tags(content, title),
            category=self.category(content),
        )
        return self.enrich(ai, content, file_type, LOCAL_GENERATOR_NAME)

    def enrich(
        self,
        ai: AIMetadata,
        content: str,
        file_type: str,
        generated_by: str,
    ) -> DocumentMetadata:
        """Attach text statistics and provenance to the four core fields."""
        return DocumentMetadata(
            title=ai.title,
            description=ai.description,
            tags=list(ai.tags),
            category=ai.category,
            page_count=estimate_page_count(content),
            word_count=len(content.split()),
            character_count=len(content),
            language=self.language(content),
            themes=self.themes(content),
            summary=self.summary(content),
            document_type=file_type,
            readability_score=self.readability(content),
            generated_by=generated_by,
            processed_at=datetime.now(timezone.utc).isoformat(),
        )

    # -- core fields --------------------------------------------------------

    def title(self, content: str, filename: str, file_type: str) -> str:
        """Pick a title: leading heading line, capitalized line, first sentence, filename."""
        if file_type in ("pdf", "docx"):
            for line in content.split("\n")[:10]:
                stripped = line.strip()
                words = stripped.split()
                if (
                    2 <= len(words) <= 12
                    and stripped[0].isupper()
                    and not _TITLE_NOISE.search(stripped)
                ):
                    return stripped[:TITLE_MAX_CHARS]

        best_line = ""
        best_ratio = 0.6
        for line in content.split("\n"):
            words = line.split()
            if not 2 <= len(words) <= 10:
                continue
            ratio = sum(1 for w in words if w[0].isupper()) / len(words)
            if ratio > best_ratio:
                best_line, best_ratio = line.strip(), ratio
        if best_line:
            return best_line[:TITLE_MAX_CHARS]

        for sentence in _SENTENCE_SPLIT.split(content):
            stripped = sentence.strip()
            if 10 < len(stripped) < 120 and not _FRONT_MATTER.match(stripped):
                return stripped[:TITLE_MAX_CHARS]

        stem = PurePath(filename).stem if filename else ""
        cleaned = re.sub(r"[-_]", " ", stem).strip()
        return cleaned or "Untitled Document"

    def description(self, content: str) -> str:
        paragraphs = [p for p in _PARAGRAPH_SPLIT.split(content) if len(p.strip()) > 50]
        if paragraphs:
            best, best_score = paragraphs[0], 0.0
            for paragraph in paragraphs:
                words = paragraph.lower().split()
                diversity = len(set(words)) / len(words)
                length_score = 1 - abs(0.7 - len(words) / 200)
                if diversity * length_score > best_score:
                    best, best_score = paragraph, diversity * length_score
            return _truncate(best.strip(), DESCRIPTION_MAX_CHARS)

        if len(content) < 500:
            return _truncate(content.strip(), 200)

        sentences = [s.strip() for s in _SENTENCE_SPLIT.split(content) if len(s.strip()) > 20]
        return ". ".join(sentences[:3]) + "."

    def tags(self, content: str, title: str) -> list[str]:
        """Frequency-ranked keywords and repeated phrases; title words count triple."""
        scores: Counter[str] = Counter()
        for word in f"{content} {title}".lower().split():
            if len(word) <= 3 or word in STOP_WORDS:
                continue
            clean = _NON_ALNUM.sub("", word)
            if len(clean) > 3:
                scores[clean] += 1

        title_words = set(title.lower().split())
        for word in scores:
            if word in title_words:
                scores[word] *= 3

        phrases: Counter[str] = Counter()
        for sentence in _SENTENCE_SPLIT.split(content.lower()):
            words = [w for w in sentence.split() if len(w) > 2]
            for i in range(len(words) - 1):
                first, second = words[i], words[i + 1]
                if first not in STOP_WORDS and second not in STOP_WORDS:
                    phrases[f"{first} {second}"] += 1
                if i < len(words) - 2 and words[i + 2] not in STOP_WORDS:
                    phrases[f"{first} {second} {words[i + 2]}"] += 1
        for phrase, count in phrases.items():
            if count > 1:
                scores[phrase] = count * 2

        ranked = [term for term, _ in scores.most_common(MAX_TAGS)]
        return normalize_tags(ranked)

    def category(self, content: str) -> str:
        """Best-scoring keyword bucket, or the default category when nothing matches."""
        text = content.lower().replace(" ai ", " artificial intelligence ")
        best, best_score = DEFAULT_CATEGORY, 0.0
        for category, (keywords, weight) in CATEGORY_KEYWORDS.items():
            score = 0.0
            for keyword in keywords:
                occurrences = text.count(keyword)
                if occurrences:
                    score += weight + (occurrences - 1) * 0.5
            if score > best_score:
                best, best_score = category, score
        return best

    # -- enrichment ---------------------------------------------------------

    def themes(self, content: str) -> list[str]:
        """Two and three word phrases (long words only) that occur more than once."""
        candidates: Counter[str] = Counter()
        for sentence in _SENTENCE_SPLIT.split(content.lower()):
            words = [w for w in sentence.split() if len(w) > 3]
            for i in range(len(words) - 1):
                candidates[f"{words[i]} {words[i + 1]}"] += 1
                if i < len(words) - 2:
                    candidates[f"{words[i]} {words[i + 1]} {words[i + 2]}"] += 1
        repeated = [(theme, count) for theme, count in candidates.most_common() if count > 1]
        return [theme for theme, _ in repeated[:MAX_THEMES]]

    def summary(self, content: str) -> str:
        if len(content) < 300:
            return content
        sentences = [s.strip() for s in _SENTENCE_SPLIT.split(content) if len(s.strip()) > 10]
        scored = []
        for index, sentence in enumerate(sentences):
            score = 0
            if index < 3:
                score += 2
            if index < len(sentences) / 2:
                score += 1
            if 8 <= len(sentence.split()) <= 25:
                score += 2
            lowered = sentence.lower()
            score += 2 * sum(1 for cue in SUMMARY_CUE_WORDS if cue in lowered)
            scored.append((score, index, sentence))
        top = sorted(scored, key=lambda item: -item[0])[:3]
        return ". ".join(sentence for _, _, sentence in sorted(top, key=lambda item: item[1])) + "."

    def readability(self, content: str) -> int:
        """100 - (1.5 * words per sentence + 10 * chars per word), clamped to 0..100."""
        sentences = [s for s in _SENTENCE_SPLIT.split(content) if s.strip()]
        words = content.split()
        if not sentences or not words:
            return 0
        characters = len(re.sub(r"\s", "", content))
        score = 100 - (len(words) / len(sentences) * 1.5 + characters / len(words) * 10)
        return max(0, min(100, round(score)))

    def language(self, content: str) -> str:
        """Language whose function words appear most often; English on ties or no match."""
        text = f" {' '.join(content.lower().split())} "
        best, best_matches = "en", 0
        for language, words in LANGUAGE_FUNCTION_WORDS.items():
            matches = sum(1 for word in words if f" {word} " in text)
            if matches > best_matches:
                best, best_matches = language, matches
        return best


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."
