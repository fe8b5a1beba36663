"""
Runtime configuration. Values come from environment variables and the secrets/ folder.
"""

import os
import os.path
from pathlib import Path


def _read_secret_file_optional(filename: str) -> str | None:
    """Read a secret file if it exists and is not empty; return None otherwise."""
    secrets_path = os.path.join(os.getenv("SECRETS_DIR", "secrets"), filename)
    if not os.path.exists(secrets_path):
        return None
    with open(secrets_path) as f:
        content = f.read().strip()
        return content or None


def _secret(env_name: str, filename: str) -> str | None:
    return os.getenv(env_name) or _read_secret_file_optional(filename)


DEBUG = os.getenv("DEBUG", "0") == "1"
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO")

DB_PATH = Path(
    os.getenv(
        "GOMI_DB_PATH",
        str(Path(__file__).resolve().parent / "database" / "gomi_admin.db"),
    )
)


AI_PROVIDERS = [
    {
        "name": "gemini",
        "base_url": "https://generativelanguage.googleapis.com/v1beta/openai",
        "api_key": _secret("GEMINI_API_KEY", "gemini_api_key.txt"),
    },
    {
        "name": "openrouter",
        "base_url": "https://openrouter.ai/api/v1",
        "api_key": _secret("OPENROUTER_API_KEY", "openrouter_api_key.txt"),
    },
    {
        "name": "groq",
        "base_url": "https://api.groq.com/openai/v1",
        "api_key": _secret("GROQ_API_KEY", "groq_api_key.txt"),
    },
]

# Rotation order: providers/models are tried in this sequence for every chunk.
AI_MODEL_ROTATION = [
    {"provider": "gemini", "model": "gemini-2.5-flash"},
    {"provider": "openrouter", "model": "google/gemini-2.0-flash-exp:free"},
    {"provider": "groq", "model": "llama-3.3-70b-versatile"},
]

AI_TIMEOUT_SECONDS = int(os.getenv("AI_TIMEOUT_SECONDS", "300"))

# PDF text is split into chunks of this many characters before extraction.
EXTRACTION_CHUNK_SIZE = int(os.getenv("EXTRACTION_CHUNK_SIZE", "5000"))
# Pause between consecutive extraction calls (external rate limit).
EXTRACTION_DELAY_SECONDS = float(os.getenv("EXTRACTION_DELAY_SECONDS", "2.0"))


API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", "3333"))


def validate_config() -> None:
    """
    Check the settings needed for PDF extraction.
    Raises RuntimeError if no AI provider key is available.
    """
    if not any(provider.get("api_key") for provider in AI_PROVIDERS):
        raise RuntimeError(
            "Configuration validation failed:\n"
            "No AI provider API keys found. Set GEMINI_API_KEY, OPENROUTER_API_KEY or "
            "GROQ_API_KEY, or add one of: secrets/gemini_api_key.txt, "
            "secrets/openrouter_api_key.txt, secrets/groq_api_key.txt"
        )
