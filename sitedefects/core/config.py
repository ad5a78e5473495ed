from dataclasses import dataclass
import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "y"}


@dataclass
class Settings:
    project_name: str = os.getenv("PROJECT_NAME", "VAY CHINNAKHET")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    store_backend: str = os.getenv("STORE_BACKEND", "memory")
    data_file: str = os.getenv("DATA_FILE", "data/defects.json")
    seed_sample: bool = _flag("SEED_SAMPLE", "true")

    supabase_url: str | None = os.getenv("SUPABASE_URL")
    supabase_key: str | None = os.getenv("SUPABASE_ANON_KEY")
    supabase_table: str = os.getenv("SUPABASE_TABLE", "defects")
    supabase_timeout: float = float(os.getenv("SUPABASE_TIMEOUT", "10"))

    cors_allow_origins: str = os.getenv("CORS_ALLOW_ORIGINS", "*")
    api_base: str = os.getenv("SITEDEFECTS_API_BASE", "http://localhost:8000")


settings = Settings()
