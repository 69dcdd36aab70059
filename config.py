import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


@dataclass
class Settings:
    # Application
    app_name: str = os.getenv("APP_NAME", "Library System")
    debug: bool = _env_bool("DEBUG", "False")
    log_level: str = os.getenv("LOG_LEVEL", "WARNING").upper()

    # Transaction log channel and consumer
    log_capacity: int = int(os.getenv("LOG_CAPACITY", "100"))
    log_delay: float = float(os.getenv("LOG_DELAY", "1.0"))  # seconds between commits
    log_poll_interval: float = float(os.getenv("LOG_POLL_INTERVAL", "0.1"))
    log_timestamp_format: str = os.getenv("LOG_TIMESTAMP_FORMAT", "%a %b %d %H:%M:%S %Y")
    drain_on_exit: bool = _env_bool("LOG_DRAIN_ON_EXIT", "True")

    # CLI output: plain | json | rich
    output_mode: str = os.getenv("LIB_CLI_OUTPUT", "plain")


settings = Settings()
