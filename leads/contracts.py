"""
Contrats de données pour le module leads.
Mise en forme d'une simulation et des coordonnées du prospect pour le CRM.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

from solar_calc.contracts import Localisation, RoofFacts, ConsumptionFacts, SimulationResult


TYPES_TOITURE = {
    'tuiles': 'Tuiles',
    'ardoises': 'Ardoises',
    'bac-acier': 'Bac acier',
    'membrane': 'Membrane EPDM',
    'autre': 'Autre',
}


@dataclass(frozen=True)
class ContactInfo:
    """Coordonnées du prospect."""
    prenom: str
    nom: str
    email: str
    telephone: str
    code_postal: str = ''
    preference_contact: str = 'email'  # 'email' ou 'phone'


@dataclass(frozen=True)
class LeadData:
    """Lead complet : adresse, toiture, consommation, contact et résultat."""
    localisation: Localisation
    toiture: RoofFacts
    consommation: ConsumptionFacts
    contact: ContactInfo
    resultat: SimulationResult


def _capitaliser(texte: str) -> str:
    return texte[:1].upper() + texte[1:]


def formater_type_toiture(type_toiture: str) -> str:
    """Libellé CRM du type de toiture (Autre si inconnu)."""
    return TYPES_TOITURE.get(type_toiture, 'Autre')


def formater_champs_lead(lead: LeadData, date_creation: Optional[date] = None) -> Dict[str, Any]:
    """
    Construit les champs de l'enregistrement CRM d'un lead.

    Args:
        lead: Données du lead
        date_creation: Date de création (défaut : aujourd'hui)

    Returns:
        dict sérialisable JSON
    """
    if date_creation is None:
        date_creation = date.today()

    contact = lead.contact
    resultat = lead.resultat

    return {
        # Informations contact
        'Prénom': contact.prenom,
        'Nom': contact.nom,
        'Email': contact.email,
        'Téléphone': contact.telephone,
        'Code postal': contact.code_postal or lead.localisation.code_postal,
        'Préférence contact': 'Email' if contact.preference_contact == 'email' else 'Téléphone',

        # Informations adresse
        'Adresse complète': lead.localisation.adresse,
        'Ville': lead.localisation.ville,

        # Informations toiture
        'Surface toiture': lead.toiture.surface_m2,
        'Orientation': _capitaliser(lead.toiture.orientation),
        'Inclinaison': lead.toiture.inclinaison_degres,
        'Type toiture': formater_type_toiture(lead.toiture.type_toiture),
        'Obstacles': lead.toiture.obstacles,

        # Informations consommation
        'Consommation annuelle': lead.consommation.consommation_annuelle_kwh,
        'Facture mensuelle': lead.consommation.facture_mensuelle,
        'Type chauffage': _capitaliser(lead.consommation.type_chauffage.value),

        # Résultats simulation
        'Puissance recommandée': resultat.puissance_kwc,
        'Production annuelle': resultat.production_annuelle_kwh,
        'Autoconsommation': resultat.taux_autoconsommation_pct,
        'Économies annuelles': resultat.economie_annuelle,
        'Abonnement mensuel': resultat.abonnement_mensuel,
        'Réduction CO2': resultat.reduction_co2_kg,

        # Métadonnées
        'Date création': date_creation.isoformat(),
        'Statut': 'Nouveau',
    }
