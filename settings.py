import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# ---------- Database ----------

DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME")

# ---------- Server ----------

PORT = int(os.getenv("PORT", 8000))
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# ---------- Admin session ----------

SESSION_SECRET = os.getenv("SESSION_SECRET", "devsecret")
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", 24 * 60 * 60))
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "PASSCODE")
ADMIN_PASSWORD_HASH = os.getenv("ADMIN_PASSWORD_HASH")

# ---------- Email notifications ----------

FROM_EMAIL = os.getenv("FROM_EMAIL")
ADMIN_NOTIFICATION_EMAIL = os.getenv("ADMIN_NOTIFICATION_EMAIL") or FROM_EMAIL
SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", 587))
SMTP_USER = os.getenv("SMTP_USER")
SMTP_PASS = os.getenv("SMTP_PASS")
SMTP_SECURE = _flag("SMTP_SECURE")

# ---------- Catalog ----------

PRODUCTS_MANIFEST = os.getenv("PRODUCTS_MANIFEST", os.path.join(BASE_DIR, "data", "products.json"))
NEWS_MANIFEST = os.getenv("NEWS_MANIFEST", os.path.join(BASE_DIR, "data", "news.json"))
USD_TO_INR = float(os.getenv("USD_TO_INR", 83))
CURRENCY_SYMBOL = os.getenv("CURRENCY_SYMBOL", "₹")
MAX_LINE_QUANTITY = int(os.getenv("MAX_LINE_QUANTITY", 10000))
SEED_ON_STARTUP = _flag("SEED_ON_STARTUP", "true")

# ---------- Rate limits (requests per window) ----------

RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", 60))
CHECKOUT_RATE_LIMIT = int(os.getenv("CHECKOUT_RATE_LIMIT", 60))
LOGIN_RATE_LIMIT = int(os.getenv("LOGIN_RATE_LIMIT", 6))

# ---------- Logging ----------

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = _flag("LOG_JSON")
