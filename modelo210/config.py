from decimal import Decimal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # App
    api_title: str = "Modelo 210"
    debug: bool = False
    log_level: str = "INFO"

    # IRNR general rate for EU/EEA residents. Applied where a request omits it.
    tax_rate: Decimal = Decimal("0.19")


settings = Settings()
