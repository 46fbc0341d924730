# planilla/config.py

import os
import logging

# --- Database Configuration ---
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__))) # planilla/ -> project root
DATA_DIR = os.environ.get("PLANILLA_DATA_DIR", os.path.join(BASE_DIR, "data"))
DB_NAME = "planilla_data.db"
DATABASE_PATH = os.path.join(DATA_DIR, DB_NAME)

# --- Logging Configuration ---
LOGS_DIR = os.environ.get("PLANILLA_LOGS_DIR", os.path.join(BASE_DIR, "logs"))
LOG_FILE_NAME = "app.log"
LOG_FILE_PATH = os.path.join(LOGS_DIR, LOG_FILE_NAME)

LOG_LEVEL = logging.DEBUG
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s'

LOGGING_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': LOG_FORMAT,
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
            'level': logging.INFO,
        },
        'file': {
            'class': 'logging.handlers.RotatingFileHandler',
            'formatter': 'standard',
            'filename': LOG_FILE_PATH,
            'maxBytes': 1024*1024*5,  # 5 MB
            'backupCount': 5,
            'level': logging.DEBUG,
            'encoding': 'utf-8',
        },
    },
    'root': {
        'handlers': ['console', 'file'],
        'level': LOG_LEVEL,
    },
}

# --- Application Settings ---
COMPANY_NAME = "PlanillasPro"
LOCALE = os.environ.get("PLANILLA_LOCALE", "es_ES") # Period names and currency formatting
CURRENCY = "USD"

# Which income tax table applies: "vigente" (lowest bracket from 472.00)
# or "anterior" (lowest bracket from 550.00). See constants.INCOME_TAX_SCHEDULES.
INCOME_TAX_SCHEDULE = os.environ.get("PLANILLA_TAX_SCHEDULE", "vigente")


def ensure_directories() -> None:
    """Creates the data and logs directories if they don't exist."""
    for directory in (DATA_DIR, LOGS_DIR):
        if not os.path.exists(directory):
            os.makedirs(directory)
