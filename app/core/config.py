"""
配置管理模块

使用 pydantic-settings 读取环境变量和 .env 文件
"""
from functools import lru_cache
from pathlib import Path
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
import json

# 项目根目录
BASE_DIR = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """应用配置类"""

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # 应用基础配置
    app_name: str = "Persona-Recruit-API"
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # 数据库配置
    database_url: str = f"sqlite+aiosqlite:///{BASE_DIR / 'data' / 'recruit.db'}"

    # CORS 配置
    cors_origins: List[str] = ["*"]

    # LLM 配置
    llm_model: str = "gpt-3.5-turbo"
    llm_api_key: str = ""
    llm_base_url: str = "https://api.openai.com/v1"
    llm_temperature: float = 0.7
    llm_max_tokens: int = 800
    llm_timeout: int = 60
    llm_fallback_models: List[str] = [
        "gpt-3.5-turbo",
        "gpt-3.5-turbo-0125",
        "gpt-4o-mini",
    ]
    llm_max_concurrency: int = 5

    # 面试对话配置
    chat_max_retries: int = 2
    chat_retry_delay: float = 2.0
    chat_min_questions: int = 3
    chat_session_ttl: int = 6 * 60 * 60
    chat_cleanup_interval: int = 5 * 60

    # 文件存储配置
    storage_backend: str = "local"
    storage_url: str = ""
    storage_service_key: str = ""
    storage_local_dir: Path = BASE_DIR / "data" / "uploads"
    storage_public_base_url: str = "http://127.0.0.1:8000/uploads"
    storage_resume_bucket: str = "applications"
    storage_asset_bucket: str = "resumes"
    max_upload_size: int = 5 * 1024 * 1024

    @field_validator("cors_origins", "llm_fallback_models", mode="before")
    @classmethod
    def parse_list(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("database_url", mode="before")
    @classmethod
    def fix_database_path(cls, v):
        if isinstance(v, str) and "./data/" in v:
            return v.replace("./data/", str(BASE_DIR / "data") + "/")
        return v

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    """获取配置单例"""
    return Settings()


settings = get_settings()
