from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	# Exam configuration
	exam_sample_size: int = Field(default=44, validation_alias="EXAM_SAMPLE_SIZE")
	# Admin question bank cap per (step, level)
	questions_per_level_limit: int = Field(default=22, validation_alias="QUESTIONS_PER_LEVEL_LIMIT")

	# Generated certificates live here and are served statically under certs_url_prefix
	certs_dir: str = Field(default="./certs", validation_alias="CERTS_DIR")
	certs_url_prefix: str = Field(default="/certs", validation_alias="CERTS_URL_PREFIX")

	# Admin auth configuration
	jwt_secret_key: str = Field(default="change-me", validation_alias="JWT_SECRET_KEY")
	jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
	access_token_expire_minutes: int = Field(default=60, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES")
	# Seed admin, created at startup when both are set
	seed_admin_email: str | None = Field(default=None, validation_alias="SEED_ADMIN_EMAIL")
	seed_admin_password: str | None = Field(default=None, validation_alias="SEED_ADMIN_PASSWORD")

	# Visit tracking geo lookup (ip-api.com compatible)
	geo_lookup_url: str = Field(default="http://ip-api.com/json", validation_alias="GEO_LOOKUP_URL")

	cors_origins: List[str] = Field(default=["http://localhost:5173"], validation_alias="CORS_ORIGINS")
	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
