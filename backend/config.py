# backend/config.py
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables early (.env at project root)
proj_root = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=proj_root / ".env")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ----- Storage -----
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./artisan.db")

# Public origin of this backend (e.g. https://<backend>.onrender.com)
BACKEND_ORIGIN = os.getenv("BACKEND_ORIGIN", "").rstrip("/")

# Folder served under /static; acts as the object-storage bucket
MEDIA_DIR = Path(os.getenv("MEDIA_DIR") or (Path(__file__).resolve().parent / "media"))

# ----- GenAI -----
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("GENAI_API_KEY") or os.getenv("GOOGLE_API_KEY") or ""
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_IMAGE_MODEL = os.getenv("GEMINI_IMAGE_MODEL", "gemini-2.0-flash-preview-image-generation")

# ----- Auth -----
JWT_SECRET = os.getenv("JWT_SECRET", "dev-secret-change-me-please-0123456789")
try:
    JWT_EXPIRY_HOURS = int(os.getenv("JWT_EXPIRY_HOURS", "24"))
except ValueError:
    JWT_EXPIRY_HOURS = 24
# Shared secret the auth provider presents when calling the profile hook
SERVICE_ROLE_KEY = os.getenv("SERVICE_ROLE_KEY", "")

# ----- Misc -----
LABEL_BASE_URL = os.getenv("LABEL_BASE_URL", "https://api.virasat.com/labels").rstrip("/")
GEOLOCATION_URL = os.getenv("GEOLOCATION_URL", "https://ipapi.co")
SEED_ON_STARTUP = os.getenv("SEED_ON_STARTUP", "on").lower() in ("on", "true", "1", "yes")
