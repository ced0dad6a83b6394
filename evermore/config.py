import os
import dotenv

# Load environment variables from .env file
dotenv.load_dotenv()

APP_NAME = "Evermore"

# Supabase Configuration
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# Storage bucket holding uploaded inspiration media
INSPIRATION_BUCKET = os.getenv("INSPIRATION_BUCKET", "inspiration")

# Vendor directory filter chips, "All" disables the category predicate
VENDOR_CATEGORY_ALL = "All"
VENDOR_CATEGORIES = [
    VENDOR_CATEGORY_ALL,
    "Venue",
    "Catering",
    "Photography",
    "Flowers",
    "Music",
    "Decoration",
    "Cake",
]

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "false").lower() == "true"
LOG_FILE_PATH = os.getenv("LOG_FILE_PATH", "evermore.log")

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8765"))

# CORS Origins
CORS_ORIGINS = [
    "http://localhost",
    "http://localhost:5173",
    "http://127.0.0.1",
    "http://127.0.0.1:5173",
    "http://localhost:8080",
]
_extra_origins = os.getenv("CORS_EXTRA_ORIGINS", "")
CORS_ORIGINS += [o.strip() for o in _extra_origins.split(",") if o.strip()]
