"""Application configuration loaded from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Type-safe configuration sourced from .env / environment."""

    # Ollama
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"
    ollama_temperature: float = 0.7
    # Upper bound for one generation round trip; there is no retry.
    generation_timeout_seconds: int = 60

    # PostgreSQL
    pg_host: str = "localhost"
    pg_port: int = 5432
    pg_database: str = "learn_with_ai"
    pg_user: str = "postgres"
    pg_password: str = "postgres"
    pg_pool_min: int = 1
    pg_pool_max: int = 5
    db_auto_init: bool = True

    # Sessions
    session_secret: str = "change-me"
    session_cookie_name: str = "learn_session"
    session_ttl_minutes: int = 60 * 24 * 7
    session_cookie_secure: bool = False

    # Audit log writer
    audit_writer_workers: int = 2

    # HTTP
    cors_origin: str = "http://localhost:3000"
    default_page_size: int = 9

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
