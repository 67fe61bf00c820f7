"""
Settings Django du simulateur solaire.

Les constantes du moteur de dimensionnement sont surchargeables via
SOLAR_ENGINE (voir solar_calc/config.py).
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'dev-only-insecure-key')
DEBUG = os.environ.get('DJANGO_DEBUG', '0') == '1'
ALLOWED_HOSTS = os.environ.get('DJANGO_ALLOWED_HOSTS', 'localhost').split(',')

INSTALLED_APPS = [
    'solar_calc',
    'weather',
    'leads',
]

USE_TZ = True
TIME_ZONE = 'Europe/Paris'
LANGUAGE_CODE = 'fr-fr'

# ==============================================================================
# MOTEUR DE DIMENSIONNEMENT
# ==============================================================================

# Surcharges des constantes par défaut (clé = champ de EngineConfig)
# Exemple : {'prix_electricite_defaut': 0.2016, 'puissance_max_kwc': 9.0}
SOLAR_ENGINE = {}

# ==============================================================================
# COLLABORATEURS EXTERNES
# ==============================================================================

PVGIS_TIMEOUT = int(os.environ.get('PVGIS_TIMEOUT', '60'))
GEOCODING_TIMEOUT = int(os.environ.get('GEOCODING_TIMEOUT', '10'))

AIRTABLE_API_KEY = os.environ.get('AIRTABLE_API_KEY', '')
AIRTABLE_BASE_ID = os.environ.get('AIRTABLE_BASE_ID', '')
AIRTABLE_TABLE_NAME = os.environ.get('AIRTABLE_TABLE_NAME', 'Leads Solaires')

# ==============================================================================
# CELERY
# ==============================================================================

CELERY_BROKER_URL = os.environ.get('CELERY_BROKER_URL', 'redis://localhost:6379/0')
CELERY_TASK_ALWAYS_EAGER = os.environ.get('CELERY_TASK_ALWAYS_EAGER', '0') == '1'
CELERY_TASK_SERIALIZER = 'json'
CELERY_ACCEPT_CONTENT = ['json']

# ==============================================================================
# LOGGING
# ==============================================================================

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '{asctime} {levelname} {name} : {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': os.environ.get('LOG_LEVEL', 'INFO'),
    },
}
