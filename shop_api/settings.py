# settings.py

import os
import logging.config

# Database
DATABASE_URL = os.environ.get('SHOP_DATABASE_URL', 'sqlite:///database.db')

# All API routes are mounted under this prefix
API_PREFIX = os.environ.get('SHOP_API_PREFIX', '/api/v1')

# Server (used by `python -m shop_api.main`)
HOST = os.environ.get('SHOP_HOST', '127.0.0.1')
PORT = int(os.environ.get('SHOP_PORT', '8000'))


# --- Authentication ---
TOKEN_TTL_MINUTES = int(os.environ.get('SHOP_TOKEN_TTL_MINUTES', '60'))


# --- Rate limiting ---
# Fixed window per client IP, shared by every rate-limited route.
RATE_LIMIT_WINDOW_MINUTES = 3
RATE_LIMIT_MAX_REQUESTS = 10
RATE_LIMIT = f'{RATE_LIMIT_MAX_REQUESTS}/{RATE_LIMIT_WINDOW_MINUTES} minutes'
RATE_LIMIT_MESSAGE = f'Too many requests, wait {RATE_LIMIT_WINDOW_MINUTES} minutes!'


# --- LOGGING CONFIGURATION ---
LOG_LEVEL = os.environ.get('SHOP_LOG_LEVEL', 'INFO')
# 'simple' or 'verbose' (adds module, process and thread)
LOG_FORMAT = os.environ.get('SHOP_LOG_FORMAT', 'simple')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{levelname} {asctime} {name} {module} {process:d} {thread:d} {message}',
            'style': '{',
        },
        'simple': {
            'format': '{levelname} {asctime} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': LOG_FORMAT,
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'shop_api': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}


def configure_logging():
    logging.config.dictConfig(LOGGING)
# --- END LOGGING CONFIGURATION ---
