from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    app_name: str = Field("invoice-reconciliation-engine", alias="APP_NAME")
    app_env: str = Field("dev", alias="APP_ENV")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    # Bank account storage ("sqlite" or "memory")
    bank_accounts_backend: str = Field("sqlite", alias="BANK_ACCOUNTS_BACKEND")
    bank_accounts_db_path: str = Field("bank_accounts.db", alias="BANK_ACCOUNTS_DB_PATH")

    # CORS allowed origins (comma-separated list for production deployment)
    cors_origins: str = Field("http://localhost:3000,http://127.0.0.1:3000", alias="CORS_ORIGINS")

    # Project matching weights
    match_strong_beneficiary_points: int = Field(10, alias="MATCH_STRONG_BENEFICIARY_POINTS")
    match_weak_beneficiary_points: int = Field(5, alias="MATCH_WEAK_BENEFICIARY_POINTS")
    match_beneficiary_in_name_points: int = Field(3, alias="MATCH_BENEFICIARY_IN_NAME_POINTS")
    match_venue_points: int = Field(8, alias="MATCH_VENUE_POINTS")
    match_explicit_date_points: int = Field(5, alias="MATCH_EXPLICIT_DATE_POINTS")
    match_label_date_points: int = Field(10, alias="MATCH_LABEL_DATE_POINTS")

    # Date windows around a project's dates (days)
    match_buffer_days_before: int = Field(7, alias="MATCH_BUFFER_DAYS_BEFORE")
    match_buffer_days_after: int = Field(60, alias="MATCH_BUFFER_DAYS_AFTER")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

settings = Settings()
