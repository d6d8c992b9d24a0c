"""PayNow Store Configuration"""

import os
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from dotenv import load_dotenv

# Load environment variables
load_dotenv(os.getenv("PAYNOW_STORE_ENV_FILE", ".env"))


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    model_config = SettingsConfigDict(case_sensitive=False, extra="ignore")

    # Application
    app_name: str = "PayNow Store"
    app_env: str = "development"
    debug: bool = True
    host: str = "0.0.0.0"
    port: int = 8000

    # PayNow integration
    paynow_integration_id: Optional[str] = None
    paynow_integration_key: Optional[str] = None
    paynow_merchant_email: str = ""
    paynow_result_url: str = "/api/payment/update"
    paynow_return_url: str = "/payment/success"

    # Checkout client
    store_base_url: str = "http://localhost:8000"

    @property
    def is_production(self) -> bool:
        """Simulated payment scenarios are disabled in production"""
        return self.app_env.strip().lower() == "production"

    @property
    def paynow_configured(self) -> bool:
        """Check if PayNow credentials are configured"""
        return bool(self.paynow_integration_id and self.paynow_integration_key)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
