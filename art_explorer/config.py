"""
Art Explorer configuration.
Loads settings and API keys from environment variables (and a local .env file).
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

_logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent

# Load .env file
load_dotenv(PROJECT_ROOT / '.env')


class Config:
    """Application configuration."""

    # Harvard Art Museums API. A missing key is not fatal: catalog calls fail
    # with MissingCredential instead.
    HAM_API_KEY = os.getenv('HAM_API_KEY', '')
    HAM_BASE_URL = os.getenv('HAM_BASE_URL', 'https://api.harvardartmuseums.org')
    if not HAM_API_KEY:
        _logger.warning("HAM_API_KEY is not set; catalog requests will fail until it is configured.")

    # Gemini (artwork overviews)
    GEMINI_API_KEY = os.getenv('GEMINI_API_KEY', '')
    GEMINI_MODEL_URL = os.getenv(
        'GEMINI_MODEL_URL',
        'https://generativelanguage.googleapis.com/v1beta/models/gemini-1.5-flash-latest:generateContent',
    )

    # Networking
    FETCH_TIMEOUT = int(os.getenv('FETCH_TIMEOUT', '30'))
    PAGE_SIZE = int(os.getenv('PAGE_SIZE', '20'))

    # Search
    SEARCH_DEBOUNCE_SECONDS = float(os.getenv('SEARCH_DEBOUNCE_SECONDS', '0.3'))

    # Local persistence (favorites, search history)
    DATA_DIR = Path(os.getenv('ART_EXPLORER_DATA_DIR', str(PROJECT_ROOT / 'data')))
    SETTINGS_FILE = DATA_DIR / 'settings.json'


# Singleton instance
config = Config()
