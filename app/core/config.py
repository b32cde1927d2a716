import os

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./creations.db")
RUN_MIGRATIONS = os.getenv("RUN_MIGRATIONS", "0") == "1"

# ✅ Security
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# ✅ Text generation (Gemini through the OpenAI-compatible endpoint)
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_BASE_URL = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/")
TEXT_MODEL = os.getenv("TEXT_MODEL", "gemini-2.0-flash")

# ✅ OpenAI (image edits)
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
IMAGE_EDIT_MODEL = os.getenv("IMAGE_EDIT_MODEL", "gpt-image-1")

# ✅ ClipDrop (text-to-image, background removal)
CLIPDROP_API_KEY = os.getenv("CLIPDROP_API_KEY")
CLIPDROP_BASE_URL = os.getenv("CLIPDROP_BASE_URL", "https://clipdrop-api.co")
PROVIDER_TIMEOUT_SECONDS = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "60"))

# ✅ Object storage (S3 / R2 / MinIO)
S3_BUCKET = os.getenv("S3_BUCKET")
S3_ENDPOINT_URL = os.getenv("S3_ENDPOINT_URL") or None
S3_REGION = os.getenv("S3_REGION") or None
S3_ACCESS_KEY_ID = os.getenv("S3_ACCESS_KEY_ID")
S3_SECRET_ACCESS_KEY = os.getenv("S3_SECRET_ACCESS_KEY")
ASSET_PUBLIC_BASE_URL = os.getenv("ASSET_PUBLIC_BASE_URL")
ASSET_URL_EXPIRES_SECONDS = int(os.getenv("ASSET_URL_EXPIRES_SECONDS", "604800"))

# ✅ Entitlements
FREE_USAGE_LIMIT = int(os.getenv("FREE_USAGE_LIMIT", "10"))
PREMIUM_PLAN_NAME = os.getenv("PREMIUM_PLAN_NAME", "premium")
MAX_RESUME_BYTES = int(os.getenv("MAX_RESUME_BYTES", str(5 * 1024 * 1024)))

# ✅ App
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "logs/creator-ai.log")
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if origin.strip()
]
