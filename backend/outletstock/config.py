# backend/outletstock/config.py
from __future__ import annotations
import os
from datetime import timedelta


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/outletstock.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///outletstock.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Session credentials are signed JWTs; nothing is stored server-side
    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-jwt-secret-change-me")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)

    # Waste photos. None means <instance_path>/uploads
    UPLOAD_FOLDER = os.environ.get("UPLOAD_FOLDER")
    WASTE_IMAGE_MAX_BYTES = 5 * 1024 * 1024
    WASTE_IMAGE_MAX_DIMENSION = 800
    WASTE_IMAGE_QUALITY = 80

    # Whole-request ceiling; leaves room for the multipart form fields
    MAX_CONTENT_LENGTH = 6 * 1024 * 1024

    # "Today" and "this month" on the dashboard are computed in this zone
    ORG_TIMEZONE = os.environ.get("ORG_TIMEZONE", "UTC")

    CLIENT_URL = os.environ.get("CLIENT_URL", "http://localhost:5173")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
