from celery import shared_task
import logging
import requests

from leads.contracts import LeadData, formater_champs_lead
from leads.services.airtable import AirtableClient


logger = logging.getLogger(__name__)


@shared_task(
    autoretry_for=(requests.RequestException,),
    retry_backoff=True,
    max_retries=3,
)
def envoyer_lead_task(fields):
    """Envoyer un lead formaté vers Airtable ; retourne l'id de l'enregistrement."""
    client = AirtableClient()
    return client.create_record(fields)


def soumettre_lead(lead: LeadData):
    """
    Met en file l'envoi d'un lead.

    L'estimation est déjà terminée : un échec d'envoi n'a aucun effet sur elle.

    Returns:
        AsyncResult Celery
    """
    fields = formater_champs_lead(lead)
    logger.info(
        f"📨 Envoi du lead {lead.contact.email} "
        f"({lead.resultat.puissance_kwc} kWc) mis en file"
    )
    return envoyer_lead_task.delay(fields)
