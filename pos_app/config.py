from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "POS Inventory"
    DATABASE_URL: str = "sqlite:///./pos.db"
    # Seconds SQLite waits on a locked database before failing a write
    DATABASE_TIMEOUT: float = 5.0

    LOG_LEVEL: str = "INFO"

    # Stock alerts
    LOW_STOCK_THRESHOLD: int = 5
    STOCK_ALERT_INTERVAL_SECONDS: float = 30.0  # 0 = no background scan

    # Seeded when the categories collection is empty
    DEFAULT_CATEGORIES: list[str] = [
        "إكسسوارات الهواتف",
        "سماعات",
        "بطاريات",
        "كابلات",
    ]

    # Store info defaults (editable at runtime, exported with backups)
    STORE_NAME: str = "محل الإكسسوارات والإلكترونيات"
    STORE_NAME_EN: str = "Electronics & Accessories Store"
    STORE_ADDRESS: str = ""
    STORE_PHONE: str = ""
    STORE_EMAIL: str = ""

    model_config = {"env_file": ".env"}


settings = Settings()
