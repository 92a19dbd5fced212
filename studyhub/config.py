# Import the standard library module used for environment variables and filesystem paths
import os

# Import helper to load environment variables from a .env file
from dotenv import load_dotenv


# Load variables from a .env file into process environment if present
load_dotenv()


def _csv(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


# Define a configuration holder class for the Flask application
class Config:
    # Secret key used by Flask and extensions; falls back to a dev value
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")

    APP_NAME = os.getenv("APP_NAME", "StudyHub")

    # Repository root, used to place the instance/ directory
    _ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))

    # Comma-separated list of CORS origins; '*' means allow all
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    # Socket.IO async mode override (e.g., 'gevent', 'threading'); empty means gevent
    SOCKETIO_ASYNC_MODE = os.getenv("SOCKETIO_ASYNC_MODE", "")

    # Development toggle for Flask debug behavior
    DEBUG = os.getenv("DEBUG", "false").lower() == "true"

    # Global logging level
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Usernames granted the admin flag when they join
    ADMIN_USERNAMES = _csv(os.getenv("ADMIN_USERNAMES", "admin"))

    # Google Generative Language API key; without it every AI call resolves to a canned answer
    GOOGLE_AI_API_KEY = os.getenv("GOOGLE_AI_API_KEY", "")
    AI_API_BASE_URL = os.getenv(
        "AI_API_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
    )
    # Default backend, backend for analytical questions, and backend tried after a not-found error
    AI_PRIMARY_MODEL = os.getenv("AI_PRIMARY_MODEL", "gemini-1.5-flash")
    AI_COMPLEX_MODEL = os.getenv("AI_COMPLEX_MODEL", "gemini-1.5-pro")
    AI_FALLBACK_MODEL = os.getenv("AI_FALLBACK_MODEL", "gemini-1.5-flash-8b")
    # Provider call timeout in seconds
    AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "15"))

    # AI rate limiting: window length in seconds, per-user and global budgets per window
    AI_RATE_WINDOW_SECONDS = float(os.getenv("AI_RATE_WINDOW_SECONDS", "60"))
    AI_USER_BUDGET = int(os.getenv("AI_USER_BUDGET", "5"))
    AI_GLOBAL_BUDGET = int(os.getenv("AI_GLOBAL_BUDGET", "30"))

    # Directory where uploaded attachments are written
    UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(_ROOT, "instance", "uploads"))
    # Attachments larger than this are rejected; the size of the file itself is checked
    UPLOAD_MAX_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))
    # Hard cap on the whole request body, leaving room for the multipart framing
    MAX_CONTENT_LENGTH = UPLOAD_MAX_BYTES + 64 * 1024
    UPLOAD_ALLOWED_MIME_TYPES = (
        "image/jpeg",
        "image/png",
        "image/gif",
        "application/pdf",
    )
