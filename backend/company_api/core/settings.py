from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, AliasChoices, model_validator

DEFAULT_KAFKA_BROKERS = "localhost:9094"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    APP_NAME: str = "Company API"
    ENV: str = Field(default="lab", validation_alias=AliasChoices("COMPANY_API_ENV", "ENV"))  # lab|prod
    LOG_LEVEL: str = Field(default="INFO", validation_alias=AliasChoices("COMPANY_API_LOG_LEVEL", "LOG_LEVEL"))

    DATABASE_URL: str = Field(default="sqlite:///./lab.db", validation_alias=AliasChoices("COMPANY_API_DATABASE_URL", "DATABASE_URL"))
    DB_POOL_TIMEOUT_S: int = Field(default=10, validation_alias=AliasChoices("COMPANY_API_DB_POOL_TIMEOUT_S", "DB_POOL_TIMEOUT_S"))

    # Auth (JWT)
    AUTH_JWT_SECRET: str = Field(default="", validation_alias=AliasChoices("COMPANY_API_AUTH_JWT_SECRET", "AUTH_JWT_SECRET", "JWT_SECRET"))
    AUTH_JWT_TTL_MIN: int = Field(default=60, validation_alias=AliasChoices("COMPANY_API_AUTH_JWT_TTL_MIN", "AUTH_JWT_TTL_MIN"))

    # Company events
    KAFKA_ENABLED: bool = Field(default=False, validation_alias=AliasChoices("COMPANY_API_KAFKA_ENABLED", "KAFKA_ENABLED"))
    KAFKA_BROKERS: str = Field(default=DEFAULT_KAFKA_BROKERS, validation_alias=AliasChoices("COMPANY_API_KAFKA_BROKERS", "KAFKA_BROKERS"))
    KAFKA_TOPIC: str = Field(default="company-events", validation_alias=AliasChoices("COMPANY_API_KAFKA_TOPIC", "KAFKA_TOPIC"))
    KAFKA_PUBLISH_TIMEOUT_S: float = Field(default=5.0, validation_alias=AliasChoices("COMPANY_API_KAFKA_PUBLISH_TIMEOUT_S", "KAFKA_PUBLISH_TIMEOUT_S"))

    @model_validator(mode="after")
    def _security_invariants(self):
        # normaliza (remove espaços acidentais)
        self.AUTH_JWT_SECRET = (self.AUTH_JWT_SECRET or "").strip()

        if self.ENV == "prod":
            if not self.AUTH_JWT_SECRET:
                raise ValueError("SECURITY: AUTH_JWT_SECRET is required when ENV=prod")
            if len(self.AUTH_JWT_SECRET) < 32:
                raise ValueError("SECURITY: AUTH_JWT_SECRET too short (min 32 chars) when ENV=prod")

        if self.AUTH_JWT_TTL_MIN <= 0:
            raise ValueError("AUTH_JWT_TTL_MIN must be positive")

        if self.KAFKA_PUBLISH_TIMEOUT_S <= 0:
            raise ValueError("KAFKA_PUBLISH_TIMEOUT_S must be positive")

        brokers = [b.strip() for b in (self.KAFKA_BROKERS or "").split(",") if b.strip()]
        self.KAFKA_BROKERS = ",".join(brokers) or DEFAULT_KAFKA_BROKERS

        return self


settings = Settings()
