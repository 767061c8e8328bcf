from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # App settings
    PROJECT_NAME: str = "SmartSpend"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")
    CLIENT_ORIGIN: str = Field(default="http://localhost:4200")
    MAX_UPLOAD_BYTES: int = 2 * 1024 * 1024  # 2 MiB

    # Plaid
    PLAID_CLIENT_ID: str = Field(default="")
    PLAID_SECRET: str = Field(default="")
    PLAID_ENV: str = Field(default="sandbox")
    PLAID_PRODUCTS: str = Field(default="transactions")
    PLAID_COUNTRY_CODES: str = Field(default="CA")
    PLAID_REDIRECT_URI: Optional[str] = None
    PLAID_TRANSACTIONS_PAGE_SIZE: int = 250
    PLAID_LOOKBACK_DAYS: int = 30

    # Assistant (Groq is tried first, then OpenAI)
    GROQ_API_KEY: Optional[str] = None
    GROQ_BASE_URL: str = "https://api.groq.com/openai/v1"
    GROQ_MODEL: str = "llama-3.1-8b-instant"
    GROQ_FALLBACK_MODELS: str = "llama-3.1-8b-instant,mixtral-8x7b-32768,gemma2-9b-it"
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    AI_TEMPERATURE: float = 0.7
    AI_MAX_TOKENS: int = 500
    AI_FALLBACK_MAX_TOKENS: int = 400

    @staticmethod
    def split_csv(value: str) -> List[str]:
        return [item.strip() for item in value.split(",") if item.strip()]

    @property
    def plaid_products(self) -> List[str]:
        return self.split_csv(self.PLAID_PRODUCTS)

    @property
    def plaid_country_codes(self) -> List[str]:
        return self.split_csv(self.PLAID_COUNTRY_CODES)

    @property
    def groq_fallback_models(self) -> List[str]:
        return self.split_csv(self.GROQ_FALLBACK_MODELS)


settings = Settings()
