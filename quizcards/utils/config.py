# quizcards/utils/config.py
import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Load .env file before defining settings
load_dotenv()

SUPPORTED_LLM_PROVIDERS = ("openai", "google")

class Settings(BaseSettings):
    # --- LLM Provider Configuration ---
    llm_provider: str = os.getenv("LLM_PROVIDER", "openai").lower()

    # OpenAI specific
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_model_name: str = os.getenv("OPENAI_MODEL_NAME", "gpt-4o-mini")

    # Google Gemini specific
    google_api_key: str | None = os.getenv("GOOGLE_API_KEY")
    google_model_name: str = os.getenv("GOOGLE_MODEL_NAME", "gemini-1.5-flash-latest")

    # Shared generation parameters
    llm_temperature: float = 0.7
    llm_timeout_seconds: int = 120
    llm_max_retries: int = 3  # Attempts per function call, including the first one

    # Quiz generation
    quiz_batch_size: int = 10
    default_locale: str = "en"
    progress_ttl_seconds: int = 300  # How long a generation snapshot is kept after its last update

    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()

settings = Settings()


def validate_llm_credentials(config: Settings) -> None:
    """Raises ValueError when the configured provider cannot be used."""
    provider = config.llm_provider.lower()
    if provider not in SUPPORTED_LLM_PROVIDERS:
        raise ValueError(f"Unsupported LLM_PROVIDER: {config.llm_provider}")
    if provider == "openai" and not config.openai_api_key:
        raise ValueError("LLM_PROVIDER is 'openai' but OPENAI_API_KEY is not set in .env")
    if provider == "google" and not config.google_api_key:
        raise ValueError("LLM_PROVIDER is 'google' but GOOGLE_API_KEY is not set in .env")
