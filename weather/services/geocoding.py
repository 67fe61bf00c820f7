"""
Géocodage des adresses via l'API Adresse (adresse.data.gouv.fr).
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import requests

from solar_calc.contracts import Localisation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdresseSuggestion:
    """Suggestion d'adresse retournée par l'autocomplétion."""
    label: str
    ville: str
    code_postal: str
    latitude: float
    longitude: float
    contexte: str = ''

    def vers_localisation(self) -> Localisation:
        return Localisation(
            latitude=self.latitude,
            longitude=self.longitude,
            adresse=self.label,
            ville=self.ville,
            code_postal=self.code_postal,
        )


class AdresseClient:
    """
    Client de l'API Adresse (Base Adresse Nationale).

    Les erreurs sont journalisées et donnent une liste vide : l'appelant
    redemande simplement une adresse.
    """

    BASE_URL = "https://api-adresse.data.gouv.fr"
    LONGUEUR_MIN = 3

    def __init__(self, timeout: Optional[int] = None):
        if timeout is None:
            from django.conf import settings
            timeout = getattr(settings, 'GEOCODING_TIMEOUT', 10)

        self.timeout = timeout
        self.session = requests.Session()

    def search(self, query: str, limit: int = 5) -> List[AdresseSuggestion]:
        """
        Recherche les adresses correspondant à une saisie libre.

        Args:
            query: Texte saisi (au moins 3 caractères)
            limit: Nombre maximum de suggestions

        Returns:
            Liste de AdresseSuggestion (vide si erreur ou saisie trop courte)
        """
        q = (query or '').strip()
        if len(q) < self.LONGUEUR_MIN:
            return []

        try:
            response = self.session.get(
                f"{self.BASE_URL}/search/",
                params={'q': q, 'limit': limit},
                timeout=self.timeout
            )
            response.raise_for_status()
            features = response.json().get('features', [])

            return [
                AdresseSuggestion(
                    label=feature['properties']['label'],
                    ville=feature['properties'].get('city', ''),
                    code_postal=feature['properties'].get('postcode', ''),
                    latitude=feature['geometry']['coordinates'][1],
                    longitude=feature['geometry']['coordinates'][0],
                    contexte=feature['properties'].get('context', ''),
                )
                for feature in features
            ]
        except (requests.RequestException, ValueError, KeyError, IndexError) as e:
            logger.warning(f"⚠️ Erreur lors de la recherche d'adresse '{q}': {e}")
            return []
