# config/celery.py
"""
Configuration Celery pour le simulateur solaire.

Les tâches asynchrones (envoi des leads) sont exécutées par Celery.
"""

import os
from celery import Celery

# Définir le module de settings Django par défaut
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('simulateur_solaire')

# Tous les paramètres Celery dans settings.py sont préfixés par 'CELERY_'
app.config_from_object('django.conf:settings', namespace='CELERY')

# Découvrir automatiquement les tâches dans les fichiers tasks.py des apps
app.autodiscover_tasks()
