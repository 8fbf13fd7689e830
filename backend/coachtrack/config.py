import os
from dotenv import load_dotenv

load_dotenv(override=False)

SQLALCHEMY_DATABASE_URL = os.getenv("SQLALCHEMY_DATABASE_URL", "sqlite:///./coachtrack.db")
SECRET_KEY = os.getenv("SECRET_KEY", "change-me")  # Use a strong random string
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

# Calendar "today" for plan versions is evaluated in this timezone
APP_TIMEZONE = os.getenv("APP_TIMEZONE", "UTC")

# Evidence uploads (cardio machine photos)
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
UPLOAD_URL_PREFIX = os.getenv("UPLOAD_URL_PREFIX", "/uploads")
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "10"))

# Password given to clients a trainer creates without one
DEFAULT_CLIENT_PASSWORD = os.getenv("DEFAULT_CLIENT_PASSWORD", "Welcome123!")

# LLM Selection Configuration
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "ollama").lower() # Options: ollama, openrouter, openai
LLM_API_KEY = os.getenv("LLM_API_KEY") or os.getenv("OPENROUTER_API_KEY")
LLM_MODEL = os.getenv("LLM_MODEL") # Optional override
OLLAMA_URL = os.getenv("OLLAMA_URL", "http://localhost:11434")

RUN_MIGRATIONS_ON_STARTUP = os.getenv("RUN_MIGRATIONS_ON_STARTUP", "true").lower() in ("1", "true", "yes")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
