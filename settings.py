import os
from urllib.parse import quote_plus

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def build_db_url():
    url = os.getenv("DATABASE_URL") or os.getenv("DB_URL")
    if url:
        return url  # if you ever set it explicitly

    user = os.getenv("DB_USER")
    pwd  = os.getenv("DB_PASSWORD")
    host = os.getenv("DB_HOST")
    port = os.getenv("DB_PORT", "5432")
    name = os.getenv("DB_NAME")

    if not all([user, pwd, host, name]):
        return "sqlite:///./finance.db"

    return f"postgresql+psycopg2://{user}:{quote_plus(pwd)}@{host}:{port}/{name}"

DATABASE_URL = build_db_url()

JWT_SECRET = os.getenv("JWT_SECRET", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

AI_CHAT_WEBHOOK_URL = os.getenv("AI_CHAT_WEBHOOK_URL")
AI_REPORT_WEBHOOK_URL = os.getenv("AI_REPORT_WEBHOOK_URL")
AI_WEBHOOK_TOKEN = os.getenv("AI_WEBHOOK_TOKEN")
AI_WEBHOOK_TIMEOUT = float(os.getenv("AI_WEBHOOK_TIMEOUT", "30"))

# Overdraft policy: when on, the debit is rejected instead of going negative
BLOCK_OVERDRAFT_ON_TRANSFER = _env_flag("BLOCK_OVERDRAFT_ON_TRANSFER", True)
BLOCK_OVERDRAFT_ON_EXPENSE = _env_flag("BLOCK_OVERDRAFT_ON_EXPENSE", False)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
