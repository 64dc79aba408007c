"""系统配置管理"""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """系统配置"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )

    # 分析与展示
    page_size: int = 10
    display_decimals: int = 2

    # 系统限制
    max_upload_size_mb: int = 50
    max_columns: int = 500
    dataset_ttl_hours: int = 24

    # 缓存配置
    cache_max_size: int = 100
    cache_ttl_seconds: int = 300

    # 服务器配置
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = True

    # 日志配置
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # 确保日志目录存在
        if self.log_file is not None:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)


# 全局配置实例
settings = Settings()
