from typing import List
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json

# 対称鍵で署名するアルゴリズムのみ許可する
SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")


class Settings(BaseSettings):
    # Security
    jwt_secret: SecretStr = Field(...)
    algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=15)

    # Database
    database_url: str = Field(default="sqlite:///./data/bank.db")

    # Environment
    environment: str = Field(default="development")

    # CORS
    cors_origins: List[str] = Field(default=["http://localhost:5173"])

    # Rate limiting
    rate_limit_enabled: bool = Field(default=True)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return json.loads(v)
        return v

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, v):
        secret = v.get_secret_value()
        if not secret:
            raise ValueError("JWT_SECRET must be provided")
        if len(secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters long")
        return v

    @field_validator("algorithm")
    @classmethod
    def validate_algorithm(cls, v):
        if v not in SUPPORTED_ALGORITHMS:
            raise ValueError(f"ALGORITHM must be one of {', '.join(SUPPORTED_ALGORITHMS)}")
        return v

    @field_validator("access_token_expire_minutes")
    @classmethod
    def validate_expire_minutes(cls, v):
        if v <= 0:
            raise ValueError("ACCESS_TOKEN_EXPIRE_MINUTES must be positive")
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra environment variables
    )
