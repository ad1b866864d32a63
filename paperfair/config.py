import os
from datetime import timedelta
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent  # project root (where wsgi.py is)
load_dotenv(BASE_DIR / ".env")

class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'paperfair.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "jwt-dev-secret")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(
        hours=int(os.getenv("JWT_ACCESS_TOKEN_EXPIRES_HOURS", "24"))
    )

    # Fixed admin console credential pair
    ADMIN_LOGIN_EMAIL = os.getenv("ADMIN_LOGIN_EMAIL", "zhipuai")
    ADMIN_LOGIN_PASSWORD = os.getenv("ADMIN_LOGIN_PASSWORD", "aminer")
    ADMIN_ACCOUNT_DOMAIN = os.getenv("ADMIN_ACCOUNT_DOMAIN", "admin.local")

    # Voting
    VOTE_QUOTA = int(os.getenv("VOTE_QUOTA", "5"))
    VOTER_EMAIL_DOMAIN = os.getenv("VOTER_EMAIL_DOMAIN", "student.edu")

    # Uploads
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", str(BASE_DIR / "uploads"))
    UPLOAD_URL_PREFIX = os.getenv("UPLOAD_URL_PREFIX", "/api/uploads")
    MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(100 * 1024 * 1024)))  # 100MB
    # Werkzeug rejects larger bodies with 413 before parsing; 1MB of room for multipart framing
    MAX_CONTENT_LENGTH = MAX_UPLOAD_BYTES + 1024 * 1024

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    SWAGGER = {"title": "PaperFair API", "uiversion": 3}
    SWAGGER_TITLE = "PaperFair API"
    SWAGGER_VERSION = "1.0.0"


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"
    ADMIN_LOGIN_EMAIL = "admin"
    ADMIN_LOGIN_PASSWORD = "correct-horse"
    LOG_LEVEL = "DEBUG"
