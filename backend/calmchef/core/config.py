from functools import lru_cache
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"

    # Budget guard: estimated tokens = characters / chars_per_token
    budget_token_limit: int = 3000
    chars_per_token: int = 4

    generate_temperature: float = 0.3
    generate_max_tokens: int = 1000
    chat_temperature: float = 0.7
    chat_max_tokens: int = 200

    tick_interval: float = 1.0
    storage_dir: str = ".calmchef"
    use_mock_data: bool = False
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_prefix": "",
        "extra": "ignore",
    }

@lru_cache()
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()
