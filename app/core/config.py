from typing import Optional
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import PostgresDsn


class PostgresSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    host: str = Field(default="localhost", alias="POSTGRES_HOST")
    port: int = Field(default=5432, alias="POSTGRES_DB_PORT")
    db_name: str = Field(default="learnova", alias="POSTGRES_DB_NAME")
    user: str = Field(default="learnova", alias="POSTGRES_DB_USER")
    password: str = Field(default="learnova", alias="POSTGRES_DB_PASSWORD")
    echo_sql: bool = Field(default=False, alias="POSTGRES_ECHO_SQL")
    pool_size: int = Field(default=5, alias="POSTGRES_POOL_SIZE")

    @computed_field
    def connection_string(self) -> PostgresDsn:
        return PostgresDsn(
            f"postgresql+asyncpg://{self.user}:{self.password}@{self.host}:{self.port}/{self.db_name}"
        )


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    name: str = Field(default="learnova", alias="APP_NAME")
    version: str = Field(default="v1", alias="API_VERSION")
    port: int = Field(default=3001, alias="PORT")
    mode: str = Field(default="prod", alias="MODE")
    frontend_url: str = Field(default="http://localhost:5173", alias="FRONTEND_URL")
    backend_url: str = Field(default="", alias="BACKEND_URL")
    session_secret: str = Field(default="fallback-secret-key", alias="SESSION_SECRET")

    @computed_field
    def is_production(self) -> bool:
        return self.mode != "dev"


class SessionSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    cookie_name: str = Field(default="learnova.sid", alias="SESSION_COOKIE_NAME")
    lifetime_seconds: int = Field(
        default=60 * 60 * 24 * 7, alias="SESSION_LIFETIME_SECONDS"
    )
    cookie_secure: Optional[bool] = Field(default=None, alias="SESSION_COOKIE_SECURE")


class HuggingFaceSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    api_key: Optional[str] = Field(default=None, alias="HF_API_KEY")
    api_base: str = Field(
        default="https://api-inference.huggingface.co/models", alias="HF_API_BASE"
    )
    model: Optional[str] = Field(default=None, alias="HF_MODEL")
    summary_model: Optional[str] = Field(default=None, alias="HF_SUMMARY_MODEL")
    summary_fallback: Optional[str] = Field(default=None, alias="HF_SUMMARY_FALLBACK")
    instruct_model: Optional[str] = Field(default=None, alias="HF_INSTRUCT_MODEL")
    qa_model: Optional[str] = Field(default=None, alias="HF_QA_MODEL")


class GeminiSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    api_key: Optional[str] = Field(default=None, alias="GEMINI_API_KEY")
    api_base: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta2/models",
        alias="GEMINI_API_BASE",
    )
    model: str = Field(default="gemini-1.5-flash", alias="GEMINI_MODEL")


class OAuthSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    google_client_id: Optional[str] = Field(default=None, alias="GOOGLE_CLIENT_ID")
    google_client_secret: Optional[str] = Field(
        default=None, alias="GOOGLE_CLIENT_SECRET"
    )
    google_callback_url: Optional[str] = Field(default=None, alias="GOOGLE_CALLBACK_URL")
    github_client_id: Optional[str] = Field(default=None, alias="GITHUB_CLIENT_ID")
    github_client_secret: Optional[str] = Field(
        default=None, alias="GITHUB_CLIENT_SECRET"
    )
    github_callback_url: Optional[str] = Field(default=None, alias="GITHUB_CALLBACK_URL")

    @computed_field
    def google_enabled(self) -> bool:
        return bool(self.google_client_id and self.google_client_secret)

    @computed_field
    def github_enabled(self) -> bool:
        return bool(self.github_client_id and self.github_client_secret)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=lambda: AppSettings())
    postgres: PostgresSettings = Field(default_factory=lambda: PostgresSettings())
    session: SessionSettings = Field(default_factory=lambda: SessionSettings())
    huggingface: HuggingFaceSettings = Field(
        default_factory=lambda: HuggingFaceSettings()
    )
    gemini: GeminiSettings = Field(default_factory=lambda: GeminiSettings())
    oauth: OAuthSettings = Field(default_factory=lambda: OAuthSettings())

    provider_timeout_seconds: float = Field(
        default=60.0, alias="PROVIDER_TIMEOUT_SECONDS"
    )

    @computed_field
    def session_cookie_secure(self) -> bool:
        if self.session.cookie_secure is not None:
            return self.session.cookie_secure
        return self.app.is_production


settings = Settings()
