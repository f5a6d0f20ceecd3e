from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "docsdb"
    db_username: str = "docsdb"
    db_password: str = "secret"

    max_job_attempts: int = 3
    job_poll_interval_seconds: int = 5
    job_backoff_base_seconds: int = 5
    worker_concurrency: int = 1

    blob_store_backend: str = "local"
    blob_store_root: str = "/app/blobs"
    temp_dir: str = ""

    pdf_engine: str = "pdfplumber"
    pdf_min_text_chars: int = 50

    ocr_enabled: bool = True
    ocr_max_pages: int = 5
    ocr_dpi: int = 200
    ocr_language: str = "eng"

    virustotal_api_key: str = ""
    virustotal_base_url: str = "https://www.virustotal.com/api/v3"
    virustotal_timeout_seconds: int = 30
    virustotal_max_file_bytes: int = 32 * 1024 * 1024
    virustotal_poll_initial_seconds: float = 2.0
    virustotal_poll_multiplier: float = 1.5
    virustotal_poll_max_seconds: float = 10.0
    virustotal_poll_max_attempts: int = 15
    signature_scan_max_file_bytes: int = 50 * 1024 * 1024

    metadata_providers: str = "gemini,groq,huggingface,ollama"
    metadata_temperature: float = 0.3
    metadata_max_tokens: int = 300

    metadata_gemini_api_key: str = ""
    metadata_gemini_model_name: str = "gemini-2.0-flash"
    metadata_gemini_base_url: str = ""
    metadata_gemini_timeout_seconds: int = 30

    metadata_groq_api_key: str = ""
    metadata_groq_model_name: str = "llama-3.1-8b-instant"
    metadata_groq_base_url: str = ""
    metadata_groq_timeout_seconds: int = 30

    metadata_huggingface_api_key: str = ""
    metadata_huggingface_model_name: str = "mistralai/Mistral-7B-Instruct-v0.2"
    metadata_huggingface_base_url: str = ""
    metadata_huggingface_timeout_seconds: int = 30

    metadata_ollama_api_key: str = "ollama"
    metadata_ollama_model_name: str = "llama2"
    metadata_ollama_base_url: str = ""
    metadata_ollama_timeout_seconds: int = 60

    metadata_openai_api_key: str = ""
    metadata_openai_model_name: str = "gpt-4o-mini"
    metadata_openai_base_url: str = ""
    metadata_openai_timeout_seconds: int = 30

    metadata_openrouter_api_key: str = ""
    metadata_openrouter_model_name: str = ""
    metadata_openrouter_base_url: str = ""
    metadata_openrouter_timeout_seconds: int = 30

    thumbnail_jpeg_quality: int = 90
