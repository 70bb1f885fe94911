from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # General
    LOG_LEVEL: str = Field(default="INFO", description="Application log level")
    BIND: str = Field(default="0.0.0.0:8076", description="API bind address")

    # CORS
    CORS_ALLOW_ORIGINS: str = Field(default="*", description="Comma-separated list of allowed origins")
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True, description="Allow credentials in CORS")
    CORS_ALLOW_METHODS: str = Field(default="*", description="Allowed CORS methods")
    CORS_ALLOW_HEADERS: str = Field(default="*", description="Allowed CORS headers")

    # Coze workflow
    COZE_API_KEY: str = Field(default="", description="Coze API key")
    COZE_WORKFLOW_ID: str = Field(default="", description="Coze workflow ID")
    COZE_API_ENDPOINT: str = Field(default="", description="Coze chat/workflow streaming endpoint")
    COZE_REQUEST_TIMEOUT: int = Field(default=120, description="Coze HTTP timeout (seconds)")
    COZE_MAX_CONCURRENCY: int = Field(default=10, description="Maximum concurrent upstream streams")
    COZE_COMPLETE_DELTA_INDEX: int = Field(
        default=2,
        description="Answer delta that carries the complete text (0 disables the shortcut)",
    )

    # Data Layer
    MONGODB_URI: str = Field(
        default="mongodb://mongo:27017/travelflow",
        description="MongoDB connection URI",
        validation_alias="MONGO_URI",
    )
    MONGODB_DB: str = Field(
        default="travelflow",
        description="MongoDB database name",
        validation_alias="MONGO_DB",
    )
    PERSISTENCE_ENABLED: bool = Field(default=True, description="Store preferences and itineraries")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()
