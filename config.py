"""
Configuration — loads from .env, provides defaults.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Weather provider (OpenWeatherMap)
OPENWEATHER_API_KEY = os.getenv("OPENWEATHER_API_KEY", "")
OPENWEATHER_URL = os.getenv("OPENWEATHER_URL", "https://api.openweathermap.org")
WEATHER_TIMEOUT = float(os.getenv("WEATHER_TIMEOUT", "10"))  # seconds

# Web UI
WEB_HOST = os.getenv("WEB_HOST", "127.0.0.1")
WEB_PORT = int(os.getenv("WEB_PORT", "8080"))
WEB_SECRET = os.getenv("WEB_SECRET", "change-me-in-production")

# Telegram (bot is disabled when the token is empty)
TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
OWNER_CHAT_ID = int(os.getenv("OWNER_CHAT_ID", "0"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
