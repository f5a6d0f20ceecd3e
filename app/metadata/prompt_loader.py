from pathlib import Path

from app.metadata.exceptions import MetadataError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(path: Path | None = None) -> str:
    """Load the metadata prompt template from a file.

    Args:
        path: Path to the prompt template file.
              Defaults to the bundled metadata_prompt.txt.

    Returns:
        The raw template string with {filename}, {content} and {categories}
        placeholders.

    Raises:
        MetadataError: if the file cannot be read.
    """
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "metadata_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MetadataError(f"Failed to load prompt template: {exc}") from exc


def load_system_prompt(path: Path | None = None) -> str:
    """Load the system prompt shared by all providers."""
    if path is None:
        path = _DEFAULT_PROMPT_DIR / "system_prompt.txt"
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise MetadataError(f"Failed to load system prompt: {exc}") from exc
