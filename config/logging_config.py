import logging
import logging.config

from config.main_config import LOG_FILE, LOG_LEVEL


class BackendFilter(logging.Filter):
    def filter(self, record):
        if not hasattr(record, 'backend'):
            record.backend = 'NONE'  # Set default backend if not provided
        return True


logging_config = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(backend)s - %(message)s'
        },
    },
    'filters': {
        'backend_filter': {
            '()': BackendFilter,
        },
    },
    'handlers': {
        'file': {
            'level': LOG_LEVEL,
            'class': 'logging.FileHandler',
            'filename': LOG_FILE,
            'formatter': 'standard',
            'filters': ['backend_filter']
        },
        'console': {
            'level': LOG_LEVEL,
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
            'filters': ['backend_filter']
        },
    },
    'loggers': {
        'use_cases': {
            'handlers': ['file', 'console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'repositories': {
            'handlers': ['file', 'console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'infrastructure': {
            'handlers': ['file', 'console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        '': {
            'handlers': ['file', 'console'],
            'level': LOG_LEVEL,
            'propagate': True,
        }
    }
}

logging.config.dictConfig(logging_config)
