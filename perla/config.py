import logging
import os

from dotenv import load_dotenv
from rich.logging import RichHandler

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    store_url: str = os.getenv("PERLA_STORE_URL", "http://127.0.0.1:8085")
    store_path: str = os.getenv("PERLA_STORE_PATH", "/data.json")
    timeout: float = float(os.getenv("PERLA_TIMEOUT", "10"))
    serialize_mutations: bool = _env_bool("PERLA_SERIALIZE_MUTATIONS", "true")

    # docstore service
    data_file: str = os.getenv("PERLA_DATA_FILE", "")
    log_level: str = os.getenv("PERLA_LOG_LEVEL", "INFO").upper()


settings = Settings()


def setup_logging(level: str = None) -> None:
    logging.basicConfig(
        level=level or settings.log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
