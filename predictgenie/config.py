"""Application configuration using Pydantic settings."""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # App Settings
    debug: bool = False
    log_level: str = "INFO"
    log_dir: str = ""  # Parent of the logs/ folder; empty means current working directory
    app_host: str = "0.0.0.0"
    app_port: int = 8001

    # ==========================================================================
    # AI Analysis Settings
    # ==========================================================================
    openai_api_key: str = ""
    llm_model: str = "gpt-4.1-mini"
    llm_temperature: float = 0.2  # Low temperature keeps the JSON shape stable
    llm_max_tokens: int = 8000  # 30 days of history per product is verbose
    llm_timeout_seconds: float = 120.0
    llm_web_search_enabled: bool = True  # Browse product/competitor pages via web search

    # Currency the AI is asked to quote prices in
    currency: str = "INR"

    # ==========================================================================
    # Price Prediction Service
    # ==========================================================================
    prediction_enabled: bool = True
    prediction_api_url: str = "http://localhost:8000"
    prediction_timeout_seconds: float = 15.0
    # "collective": one /predict/batch request for the whole batch
    # "per_item": one /predict request per analysis, run concurrently
    batch_prediction_mode: Literal["collective", "per_item"] = "collective"

    # ==========================================================================
    # CSV Upload
    # ==========================================================================
    max_csv_upload_bytes: int = 2 * 1024 * 1024

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
