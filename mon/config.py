import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    MON_SERVICES_FILE: str | None = os.getenv("MON_SERVICES_FILE")
    MON_CONFIG_DIR: str | None = os.getenv("MON_CONFIG_DIR")
    MON_PROBE_TIMEOUT_SECONDS: float = float(
        os.getenv("MON_PROBE_TIMEOUT_SECONDS", "2.0")
    )
    MON_LOG_LEVEL: str = os.getenv("MON_LOG_LEVEL", "INFO").upper()
    MON_NOTIFIER: str = os.getenv("MON_NOTIFIER", "auto").strip().lower()
    MON_NTFY_URL: str | None = os.getenv("MON_NTFY_URL")
    MON_NTFY_TOPIC: str | None = os.getenv("MON_NTFY_TOPIC")


settings = Settings()
