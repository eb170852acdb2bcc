"""
File: app/core/config.py
Description: 全局应用配置 (pydantic-settings)

所有配置项从环境变量 / .env 文件加载。
本模块负责：
1. 校验环境变量类型，解析 CORS 列表等复杂类型
2. 组装数据库 DSN (部署环境 postgresql+asyncpg，本地/测试可直接给 sqlite+aiosqlite)
3. 定义日志、Redis、JWT、上传目录、分页上限等运行参数
4. 配置缺失时启动即失败 (Fail Fast)

Author: jinmozhe
Created: 2026-03-02
"""

from typing import Literal

from pydantic import AnyHttpUrl, model_validator
from pydantic_core import MultiHostUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """全局配置对象 (唯一真实来源)"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=True,
    )

    # --------------------------------------------------------------------------
    # 1. General
    # --------------------------------------------------------------------------
    PROJECT_NAME: str = "Community Hub API"
    API_PREFIX: str = "/api"
    ENVIRONMENT: Literal["local", "dev", "test", "prod"] = "local"
    DEBUG: bool = False

    # JWT 签名密钥，生产环境要求 >= 32 字符
    SECRET_KEY: str | None = None

    BACKEND_CORS_ORIGINS: list[AnyHttpUrl] = []

    # --------------------------------------------------------------------------
    # 2. Database
    # --------------------------------------------------------------------------
    POSTGRES_SERVER: str | None = None
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str | None = None
    POSTGRES_PASSWORD: str | None = None
    POSTGRES_DB: str | None = None

    # 连接池参数 (仅对 PostgreSQL 生效，SQLite 使用驱动默认池)
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_PRE_PING: bool = True
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # 完整 DSN (可选，优先于 POSTGRES_*)
    # 例: sqlite+aiosqlite:///./community.db
    SQLALCHEMY_DATABASE_URI: str | None = None

    # 启动时若 groups 表为空，写入默认小组
    SEED_DEFAULT_GROUPS: bool = True

    # --------------------------------------------------------------------------
    # 3. Logging (Loguru)
    # --------------------------------------------------------------------------
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_JSON_FORMAT: bool = False
    LOG_FILE_ENABLED: bool = False
    LOG_DIR: str = "logs"
    LOG_ROTATION: str = "1 day"
    LOG_RETENTION: str = "14 days"
    LOG_COMPRESSION: str = "zip"
    LOG_DIAGNOSE: bool = False

    # --------------------------------------------------------------------------
    # 4. Redis (Refresh Token 存储)
    # --------------------------------------------------------------------------
    REDIS_URL: str = "redis://localhost:6379/0"

    # --------------------------------------------------------------------------
    # 5. Security (JWT)
    # --------------------------------------------------------------------------
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 14
    ALGORITHM: str = "HS256"

    # --------------------------------------------------------------------------
    # 6. Uploads
    # --------------------------------------------------------------------------
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    UPLOAD_MAX_BYTES: int = 10 * 1024 * 1024

    # --------------------------------------------------------------------------
    # 7. Feed 分页
    # --------------------------------------------------------------------------
    USER_GROUP_POSTS_DEFAULT_LIMIT: int = 50
    USER_GROUP_POSTS_MAX_LIMIT: int = 100

    # --------------------------------------------------------------------------
    # Properties
    # --------------------------------------------------------------------------
    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "prod"

    @property
    def is_debug(self) -> bool:
        """仅在非生产环境下允许 DEBUG"""
        return self.DEBUG and not self.is_production

    @property
    def is_sqlite(self) -> bool:
        return str(self.SQLALCHEMY_DATABASE_URI).startswith("sqlite")

    # --------------------------------------------------------------------------
    # Validators
    # --------------------------------------------------------------------------
    @model_validator(mode="after")
    def _validate_and_build_db_uri(self) -> "Settings":
        """校验必填项，并在未直接给出 DSN 时由 POSTGRES_* 组装。"""
        if not self.SECRET_KEY:
            raise ValueError("SECRET_KEY must be set in the environment or .env")

        if self.is_production and len(self.SECRET_KEY) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters in prod")

        if self.USER_GROUP_POSTS_DEFAULT_LIMIT > self.USER_GROUP_POSTS_MAX_LIMIT:
            raise ValueError(
                "USER_GROUP_POSTS_DEFAULT_LIMIT cannot exceed USER_GROUP_POSTS_MAX_LIMIT"
            )

        if self.SQLALCHEMY_DATABASE_URI:
            return self

        required_pg_fields = [
            "POSTGRES_SERVER",
            "POSTGRES_USER",
            "POSTGRES_PASSWORD",
            "POSTGRES_DB",
        ]
        missing_fields = [f for f in required_pg_fields if not getattr(self, f)]
        if missing_fields:
            raise ValueError(
                f"Cannot build database DSN, missing: {', '.join(missing_fields)}"
            )

        self.SQLALCHEMY_DATABASE_URI = str(
            MultiHostUrl.build(
                scheme="postgresql+asyncpg",
                username=self.POSTGRES_USER,  # type: ignore[arg-type]
                password=self.POSTGRES_PASSWORD,  # type: ignore[arg-type]
                host=self.POSTGRES_SERVER,  # type: ignore[arg-type]
                port=self.POSTGRES_PORT,
                path=self.POSTGRES_DB,  # type: ignore[arg-type]
            )
        )

        return self


# 单例配置对象，加载失败时 pydantic 抛出 ValidationError
settings = Settings()
