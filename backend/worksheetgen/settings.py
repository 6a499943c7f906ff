from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	# Model used for worksheet generation and grading
	gemini_model: str = Field(default="gemini-2.0-flash", validation_alias="GEMINI_MODEL")
	# Optional: full generateContent URL override (proxies, regional endpoints)
	gemini_base_url: str | None = Field(default=None, validation_alias="GEMINI_BASE_URL")
	gemini_temperature: float = Field(default=0.7, validation_alias="GEMINI_TEMPERATURE")
	gemini_max_output_tokens: int = Field(default=8192, validation_alias="GEMINI_MAX_OUTPUT_TOKENS")
	gemini_timeout_seconds: float = Field(default=30.0, validation_alias="GEMINI_TIMEOUT_SECONDS")

	# Generation pipeline
	cache_ttl_seconds: int = Field(default=300, validation_alias="WORKSHEET_CACHE_TTL_SECONDS")
	retry_limit: int = Field(default=2, validation_alias="WORKSHEET_RETRY_LIMIT")
	retry_delay_seconds: float = Field(default=1.0, validation_alias="WORKSHEET_RETRY_DELAY_SECONDS")

	# Hosted auth provider: tokens are issued elsewhere, we only verify them
	auth_jwt_secret: str = Field(default="change-me", validation_alias="AUTH_JWT_SECRET")
	auth_jwt_algorithm: str = Field(default="HS256", validation_alias="AUTH_JWT_ALGORITHM")
	auth_jwt_audience: str | None = Field(default=None, validation_alias="AUTH_JWT_AUDIENCE")

	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
