from __future__ import annotations
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List
from dotenv import load_dotenv
load_dotenv()  # populates os.environ from .env


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # LLM
    openai_api_key: str
    openai_model_recipes: str = "gpt-4o-mini"
    openai_model_extract: str = "gpt-4o-mini"
    llm_timeout_seconds: float = Field(60.0, gt=0)
    llm_max_retries: int = Field(0, ge=0)
    recipe_count: int = Field(3, ge=1, le=10)

    # OCR
    ocr_lang: str = "eng"
    ocr_timeout_seconds: float = Field(30.0, gt=0)
    max_upload_bytes: int = Field(10 * 1024 * 1024, gt=0)

    # Storage
    data_dir: str = "data"
    default_user_id: str = "demo-user"

    cors_allow_origins: List[str] = Field(default_factory=lambda: ["http://127.0.0.1:3000"])
    log_level: str = "INFO"
