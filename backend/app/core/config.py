import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote_plus

DEFAULT_DATA_PATH = Path(__file__).resolve().parent.parent / "data"
TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    data_dir: str
    database_url: str
    response_store: str
    document_store_url: str
    document_store_api_key: str
    document_store_timeout: float
    fallback_dir: str
    fallback_storage_key: str
    forms_path: str
    answer_keys_path: str
    leaderboard_size: int
    admin_passcode: str
    create_tables: bool


def _build_database_url(
    mysql_host: str,
    mysql_port: int,
    mysql_user: str,
    mysql_password: str,
    mysql_database: str,
) -> str:
    password = quote_plus(mysql_password)
    return (
        "mysql+pymysql://"
        f"{mysql_user}:{password}@{mysql_host}:{mysql_port}/{mysql_database}"
        "?charset=utf8mb4"
    )


def load_settings() -> Settings:
    data_dir = os.getenv("DATA_DIR", "data")

    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        mysql_host = os.getenv("MYSQL_HOST", "")
        if mysql_host:
            database_url = _build_database_url(
                mysql_host=mysql_host,
                mysql_port=int(os.getenv("MYSQL_PORT", "3306")),
                mysql_user=os.getenv("MYSQL_USER", "app_user"),
                mysql_password=os.getenv("MYSQL_PASSWORD", "app_pass"),
                mysql_database=os.getenv("MYSQL_DATABASE", "app_db"),
            )
        else:
            database_url = f"sqlite:///{os.path.join(data_dir, 'responses.db')}"

    fallback_dir = os.getenv("FALLBACK_DIR")
    if fallback_dir is None:
        fallback_dir = os.path.join(data_dir, "fallback")

    return Settings(
        data_dir=data_dir,
        database_url=database_url,
        response_store=os.getenv("RESPONSE_STORE", "sql"),
        document_store_url=os.getenv("DOCUMENT_STORE_URL", ""),
        document_store_api_key=os.getenv("DOCUMENT_STORE_API_KEY", ""),
        document_store_timeout=float(os.getenv("DOCUMENT_STORE_TIMEOUT", "10")),
        fallback_dir=fallback_dir,
        fallback_storage_key=os.getenv("FALLBACK_STORAGE_KEY", "gfc-local-responses"),
        forms_path=os.getenv("FORMS_PATH", str(DEFAULT_DATA_PATH / "forms.json")),
        answer_keys_path=os.getenv("ANSWER_KEYS_PATH", str(DEFAULT_DATA_PATH / "answer_keys.json")),
        leaderboard_size=int(os.getenv("LEADERBOARD_SIZE", "5")),
        admin_passcode=os.getenv("ADMIN_PASSCODE", "140608"),
        create_tables=os.getenv("CREATE_TABLES", "1").strip().lower() in TRUTHY,
    )
