import os

DEFAULT_DB_PATH = "sanghini.db" if os.name == "nt" else "/tmp/sanghini.db"
DB_PATH = os.environ.get("DB_PATH", DEFAULT_DB_PATH)

GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY")
GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-1.5-flash")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
PORT = int(os.environ.get("PORT", 5000))

RATELIMIT_ENABLED = os.environ.get("RATELIMIT_ENABLED", "true").lower() not in {"0", "false", "no"}
CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
