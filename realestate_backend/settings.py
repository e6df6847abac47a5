"""
Django settings for the real estate analytics backend.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "insecure-development-key")
DEBUG = os.environ.get("DJANGO_DEBUG", "1") == "1"
ALLOWED_HOSTS = os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

INSTALLED_APPS = [
    "api",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "realestate_backend.urls"
WSGI_APPLICATION = "realestate_backend.wsgi.application"

# Listings come from a CSV snapshot; there is no relational store.
DATABASES = {}

USE_TZ = True

PROPERTY_CSV_PATH = Path(os.environ.get("PROPERTY_CSV_PATH", BASE_DIR / "media" / "properties.csv"))
ANALYTICS_LOAD_RETRIES = int(os.environ.get("ANALYTICS_LOAD_RETRIES", "2"))

# Field overrides for analytics.config.AnalyticsConfig, e.g. {"base_rent_per_area": 30.0}.
ANALYTICS_OVERRIDES = {}

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "analytics": {
            "handlers": ["console"],
            "level": os.environ.get("ANALYTICS_LOG_LEVEL", "INFO"),
        },
        "api": {
            "handlers": ["console"],
            "level": os.environ.get("ANALYTICS_LOG_LEVEL", "INFO"),
        },
    },
}
