"""
Configuration du moteur de dimensionnement solaire.

Toutes les constantes (bornes réglementaires, tarifs, facteurs) sont
regroupées dans une structure immuable passée à chaque composant.
Surchargeable via settings.SOLAR_ENGINE.
"""

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)


# ==============================================================================
# GRILLE D'ABONNEMENT MENSUEL (€ TTC / mois, contrat 25 ans)
# ==============================================================================

GRILLE_ABONNEMENT_DEFAUT: Tuple[Tuple[float, float], ...] = (
    (2.5, 49.0),
    (3.0, 59.0),
    (3.5, 68.5),
    (4.0, 78.0),
    (4.5, 87.0),
    (5.0, 96.0),
    (5.5, 105.5),
    (6.0, 115.0),
    (6.5, 124.0),
    (7.0, 132.0),
    (7.5, 140.0),
    (8.0, 149.0),
    (8.5, 158.0),
    (9.0, 167.0),
    (9.5, 176.0),
    (10.0, 185.0),
    (10.5, 194.0),
    (11.0, 203.0),
    (11.5, 212.0),
    (12.0, 221.0),
    (15.0, 275.0),
    (18.0, 329.0),
    (20.0, 365.0),
    (25.0, 455.0),
    (30.0, 545.0),
    (36.0, 654.0),
)


@dataclass(frozen=True)
class EngineConfig:
    """
    Constantes du moteur de dimensionnement.

    Attributes:
        puissance_min_kwc: Puissance minimale installable (kWc)
        puissance_max_kwc: Puissance maximale installable (kWc)
        pas_puissance_kwc: Pas de recherche de la puissance optimale (kWc)
        prix_electricite_defaut: Prix d'achat par défaut (€/kWh)
        prix_personnalise_min: Borne basse d'un prix personnalisé plausible (€/kWh)
        prix_personnalise_max: Borne haute d'un prix personnalisé plausible (€/kWh)
        consommation_defaut_kwh: Consommation annuelle par défaut (kWh)
        autoconsommation_min_pct: Taux d'autoconsommation minimum garanti (%)
        densite_puissance_kwc_m2: Puissance installable par m² de toiture
        facteur_surface_obstacles: Part de surface utilisable en présence d'obstacles
        facteur_co2_kg_kwh: CO2 évité par kWh produit (kg/kWh)
        seuil_grosse_consommation_kwh: Seuil au-delà duquel le ratio réduit s'applique
        ratio_production_grosse_conso: Production max / consommation (grosses consommations)
        ratio_production_standard: Production max / consommation (cas standard)
        couverture_min_secours: Part de consommation couverte si rien n'est rentable
        seuil_rachat_kwc: Puissance à partir de laquelle le tarif de rachat haut s'applique
        plafond_rachat_kwc: Plafond du tarif de rachat haut (kWc)
        prix_rachat_bas: Tarif de rachat du surplus sous le seuil (€/kWh)
        prix_rachat_haut: Tarif de rachat du surplus au-delà du seuil (€/kWh)
        increment_abonnement_kwc: Progression de l'abonnement au-delà de la grille (€/kWc)
        grille_abonnement: Couples (puissance kWc, abonnement €/mois) croissants
    """
    puissance_min_kwc: float = 2.5
    puissance_max_kwc: float = 36.0
    pas_puissance_kwc: float = 0.5
    prix_electricite_defaut: float = 0.1952
    prix_personnalise_min: float = 0.10
    prix_personnalise_max: float = 0.50
    consommation_defaut_kwh: float = 4000.0
    autoconsommation_min_pct: float = 60.0
    densite_puissance_kwc_m2: float = 0.6
    facteur_surface_obstacles: float = 0.8
    facteur_co2_kg_kwh: float = 0.079
    seuil_grosse_consommation_kwh: float = 15000.0
    ratio_production_grosse_conso: float = 1.2
    ratio_production_standard: float = 1.5
    couverture_min_secours: float = 0.3
    seuil_rachat_kwc: float = 9.0
    plafond_rachat_kwc: float = 100.0
    prix_rachat_bas: float = 0.04
    prix_rachat_haut: float = 0.0617
    increment_abonnement_kwc: float = 18.0
    grille_abonnement: Tuple[Tuple[float, float], ...] = field(
        default=GRILLE_ABONNEMENT_DEFAUT
    )

    def __post_init__(self):
        if self.puissance_min_kwc <= 0 or self.puissance_max_kwc < self.puissance_min_kwc:
            raise ValueError(
                f"Bornes de puissance invalides : [{self.puissance_min_kwc}, "
                f"{self.puissance_max_kwc}] kWc"
            )
        if not self.grille_abonnement:
            raise ValueError("La grille d'abonnement ne peut pas être vide")

        # La grille doit être strictement croissante en puissance ET en prix
        for (p1, t1), (p2, t2) in zip(self.grille_abonnement, self.grille_abonnement[1:]):
            if p2 <= p1 or t2 <= t1:
                raise ValueError(
                    f"Grille d'abonnement non croissante entre {p1} kWc ({t1}€) "
                    f"et {p2} kWc ({t2}€)"
                )

    @property
    def grille_dict(self) -> Dict[float, float]:
        """Grille d'abonnement sous forme de dictionnaire."""
        return dict(self.grille_abonnement)


def _normaliser_grille(grille) -> Tuple[Tuple[float, float], ...]:
    """Accepte un dict {puissance: prix} (clés éventuellement en str) ou une liste de couples."""
    if isinstance(grille, dict):
        couples = grille.items()
    else:
        couples = grille
    return tuple(sorted((float(p), float(t)) for p, t in couples))


def load_engine_config(overrides: Optional[Dict] = None) -> EngineConfig:
    """
    Construit la configuration du moteur depuis settings.SOLAR_ENGINE.

    Args:
        overrides: Surcharges explicites (prioritaires sur les settings)

    Returns:
        EngineConfig

    Raises:
        ValueError: Clé inconnue ou grille incohérente
    """
    from django.conf import settings

    valeurs = dict(getattr(settings, 'SOLAR_ENGINE', None) or {})
    if overrides:
        valeurs.update(overrides)

    if not valeurs:
        return EngineConfig()

    connus = {f.name for f in fields(EngineConfig)}
    inconnus = set(valeurs) - connus
    if inconnus:
        raise ValueError(f"Paramètres SOLAR_ENGINE inconnus : {sorted(inconnus)}")

    if 'grille_abonnement' in valeurs:
        valeurs['grille_abonnement'] = _normaliser_grille(valeurs['grille_abonnement'])

    logger.debug(f"Surcharges moteur appliquées : {sorted(valeurs)}")
    return replace(EngineConfig(), **valeurs)
