"""Django settings for the example kiosk.

Uses a file-based cache so the stored schedule and the selected room
survive restarts, and reads the export URL from the environment.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env")

SECRET_KEY = "example-dev-key-not-for-production"
DEBUG = True
ALLOWED_HOSTS = ["*"]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.staticfiles",
    "django_talkboard",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "urls"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.filebased.FileBasedCache",
        "LOCATION": BASE_DIR / ".talkboard-cache",
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
USE_TZ = True
STATIC_URL = "static/"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "handlers": {"console": {"class": "logging.StreamHandler"}},
    "loggers": {
        "django_talkboard": {"handlers": ["console"], "level": os.environ.get("TALKBOARD_LOG_LEVEL", "INFO")},
    },
}

DJANGO_TALKBOARD = {
    "schedule": {
        "url": os.environ.get(
            "TALKBOARD_SCHEDULE_URL",
            "https://pretalx.luga.de/lit-2024/schedule/export/schedule.json",
        ),
    },
    "display": {
        "timezone": "Europe/Berlin",
        "hidden_rooms": ["Raum E", "Raum F"],
        "overview_label": "Übersicht",
    },
}
