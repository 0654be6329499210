import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./users.db")
SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Profile image storage
STORAGE_MODE = os.getenv("STORAGE_MODE", "local").lower()
UPLOAD_BASE_PATH = os.getenv("UPLOAD_BASE_PATH", "storage")
PUBLIC_STORAGE_URL = os.getenv("PUBLIC_STORAGE_URL", "/storage").rstrip("/")
PROFILE_IMAGE_COLLECTION = "profile_images"

# Validation
MAX_PROFILE_IMAGE_KB = 2048
MAX_PROFILE_IMAGE_BYTES = MAX_PROFILE_IMAGE_KB * 1024
ALLOWED_IMAGE_TYPES = ["jpg", "png", "gif"]
MOBILE_DIGITS = 10
