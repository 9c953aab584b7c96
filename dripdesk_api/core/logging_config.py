# dripdesk_api/core/logging_config.py

import logging
import logging.config
import os

from .config import settings


def setup_logging():
    """
    Configures logging for the record API: console plus a rotating log file.
    """
    log_dir = settings.LOG_DIR
    os.makedirs(log_dir, exist_ok=True)
    log_file_path = os.path.join(log_dir, 'dripdesk_api.log')
    level = settings.LOG_LEVEL

    LOGGING_CONFIG = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'default': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'default',
                'level': level,
                'stream': 'ext://sys.stdout',
            },
            'rotating_file': {
                'class': 'logging.handlers.RotatingFileHandler',
                'formatter': 'default',
                'level': level,
                'filename': log_file_path,
                'maxBytes': 1024 * 1024 * 5,  # 5 MB
                'backupCount': 5,
                'encoding': 'utf-8',
            },
        },
        'loggers': {
            '': {
                'handlers': ['console', 'rotating_file'],
                'level': level,
            },
            'uvicorn.error': {
                'handlers': ['console', 'rotating_file'],
                'level': 'INFO',
                'propagate': False,
            },
            'uvicorn.access': {
                'handlers': ['console', 'rotating_file'],
                'level': 'WARNING',  # access logs are noise at INFO
                'propagate': False,
            },
        }
    }

    logging.config.dictConfig(LOGGING_CONFIG)
    root_logger = logging.getLogger()
    root_logger.info("Logging system initialized.")
    root_logger.info(f"Log files will be saved to: {log_file_path}")
