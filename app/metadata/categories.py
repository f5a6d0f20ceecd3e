"""Closed category enum shared by AI prompts, validation and local detection."""

DEFAULT_CATEGORY = "other"

CATEGORIES: tuple[str, ...] = (
    "for-you", "technology", "business", "education", "health", "entertainment",
    "sports", "finance-money-management", "games-activities", "comics", "philosophy",
    "career-growth", "politics", "biography-memoir", "study-aids-test-prep", "law",
    "art", "science", "history", "erotica", "lifestyle", "religion-spirituality",
    "self-improvement", "language-arts", "cooking-food-wine", "true-crime",
    "sheet-music", "fiction", "non-fiction", "science-fiction", "fantasy", "romance",
    "thriller-suspense", "horror", "poetry", "graphic-novels", "young-adult",
    "children", "parenting-family", "marketing-sales", "psychology",
    "social-sciences", "engineering", "mathematics", "data-science",
    "nature-environment", "travel", "reference", "design", "news-media",
    "professional-development", DEFAULT_CATEGORY,
)

_CATEGORY_SET = frozenset(CATEGORIES)


def is_valid_category(value: str) -> bool:
    return value in _CATEGORY_SET
