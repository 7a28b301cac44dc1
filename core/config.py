# Файл конфігурації, завантажує змінні з .env
from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class Settings(BaseSettings):
    model_config = ConfigDict(extra="ignore", env_file=".env")

    # 1. Firebase
    FIREBASE_SERVICE_ACCOUNT_KEY_PATH: str | None = None

    # 2. CORS (кома-сепарейтед)
    FRONTEND_ORIGIN: str = ""

    # 3. Локальна розробка без токена
    ALLOW_LOCAL_DEV_USER: bool = False
    LOCAL_DEV_UID: str = "local-dev"

    # 4. Spending advisor
    # Bills due within this many days must stay covered after a purchase
    CAUTION_WINDOW_DAYS: int = 7
    CALCULATED_BALANCE_WINDOW_DAYS: int = 7
    CURRENCY_SYMBOL: str = "$"


settings = Settings()
