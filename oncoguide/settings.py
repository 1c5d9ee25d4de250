# oncoguide/settings.py
import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # core
    APP_NAME: str = Field(default="OncoGuide")
    ENV: str = Field(default=os.getenv("APP_ENV", "dev"))
    DEBUG: bool = Field(default=True)
    LOG_LEVEL: str = Field(default="INFO")

    # chunk corpus (SQLite FTS5)
    DB_PATH: str = Field(default="data/db/corpus.db")

    # primary provider
    TOGETHER_API_KEY: str | None = None
    TOGETHER_BASE_URL: str = Field(default="https://api.together.xyz/v1")
    TOGETHER_MODEL: str = Field(default="meta-llama/Llama-3.3-70B-Instruct-Turbo")

    # secondary provider
    GROQ_API_KEY: str | None = None
    GROQ_BASE_URL: str = Field(default="https://api.groq.com/openai/v1")
    GROQ_MODEL: str = Field(default="llama-3.1-70b-versatile")

    # local inference
    USE_OLLAMA: bool = Field(default=False)
    OLLAMA_HOST: str = Field(default="http://localhost:11434")
    OLLAMA_MODEL: str = Field(default="mistral:7b-instruct")

    # last 6 exchanges
    HISTORY_MAX_TURNS: int = Field(default=12)

    model_config = SettingsConfigDict(
        env_file=".env.dev",
        extra="ignore",
    )


settings = Settings()
