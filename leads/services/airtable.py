"""
Client REST Airtable pour le stockage des leads.

API Documentation : https://airtable.com/developers/web/api/introduction
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)


class LeadStorageError(Exception):
    """Échec de l'envoi d'un lead vers Airtable."""


class AirtableClient:
    """
    Client minimal de l'API Airtable (création d'enregistrements).
    """

    BASE_URL = "https://api.airtable.com/v0"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_id: Optional[str] = None,
        table: Optional[str] = None,
        timeout: int = 15
    ):
        """
        Args:
            api_key: Jeton d'accès (défaut : settings.AIRTABLE_API_KEY)
            base_id: Identifiant de la base (défaut : settings.AIRTABLE_BASE_ID)
            table: Nom de la table (défaut : settings.AIRTABLE_TABLE_NAME)
            timeout: Timeout HTTP en secondes
        """
        from django.conf import settings

        self.api_key = api_key if api_key is not None else settings.AIRTABLE_API_KEY
        self.base_id = base_id if base_id is not None else settings.AIRTABLE_BASE_ID
        self.table = table if table is not None else settings.AIRTABLE_TABLE_NAME
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            'Authorization': f'Bearer {self.api_key}',
            'Content-Type': 'application/json',
        })

    @property
    def est_configure(self) -> bool:
        return bool(self.api_key and self.base_id)

    @property
    def table_url(self) -> str:
        return f"{self.BASE_URL}/{self.base_id}/{quote(self.table)}"

    def create_record(self, fields: Dict[str, Any]) -> str:
        """
        Crée un enregistrement dans la table des leads.

        Args:
            fields: Champs de l'enregistrement

        Returns:
            Identifiant Airtable de l'enregistrement

        Raises:
            LeadStorageError: Configuration manquante ou réponse inattendue
            requests.RequestException: Erreur réseau (réessayable)
        """
        if not self.est_configure:
            raise LeadStorageError(
                "Configuration Airtable manquante. Vérifiez AIRTABLE_API_KEY et AIRTABLE_BASE_ID."
            )

        try:
            response = self.session.post(
                self.table_url,
                json={'fields': fields, 'typecast': True},
                timeout=self.timeout
            )
            response.raise_for_status()
            record_id = response.json()['id']
        except requests.exceptions.HTTPError as e:
            logger.error(f"Erreur HTTP Airtable {e.response.status_code}: {e.response.text[:500]}")
            raise
        except (ValueError, KeyError) as e:
            raise LeadStorageError(f"Réponse Airtable inattendue: {e}") from e

        logger.info(f"Lead envoyé vers Airtable avec succès: {record_id}")
        return record_id

    def test_connection(self) -> bool:
        """Vérifie l'accès à la table (lecture d'un enregistrement)."""
        if not self.est_configure:
            return False

        try:
            response = self.session.get(
                self.table_url,
                params={'maxRecords': 1},
                timeout=self.timeout
            )
            response.raise_for_status()
            return True
        except requests.RequestException as e:
            logger.error(f"Erreur de connexion Airtable: {e}")
            return False
