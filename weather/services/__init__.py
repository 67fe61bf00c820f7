"""
Services pour l'app weather.
"""

from .pvgis import PVGISClient
from .geocoding import AdresseClient, AdresseSuggestion

__all__ = [
    'PVGISClient',
    'AdresseClient',
    'AdresseSuggestion',
]
