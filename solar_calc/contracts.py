"""
Contrats de données pour le module solar_calc.
Définit les entrées et les structures garanties par le moteur de dimensionnement.
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import List, Dict, Any, Optional


class TypeChauffage(str, Enum):
    """Types de chauffage déclarés par l'occupant."""
    ELECTRIQUE = "electrique"
    GAZ = "gaz"
    FIOUL = "fioul"
    AUTRE = "autre"

    @classmethod
    def depuis_valeur(cls, valeur) -> "TypeChauffage":
        """Convertit une saisie libre ; toute valeur inconnue devient AUTRE."""
        if isinstance(valeur, cls):
            return valeur
        try:
            return cls(str(valeur).strip().lower())
        except ValueError:
            return cls.AUTRE


@dataclass(frozen=True)
class Localisation:
    """
    Adresse géocodée du site.

    Attributes:
        latitude: Latitude en degrés décimaux (None si non géocodée)
        longitude: Longitude en degrés décimaux (None si non géocodée)
        adresse: Libellé complet de l'adresse
        ville: Commune
        code_postal: Code postal
    """
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    adresse: str = ''
    ville: str = ''
    code_postal: str = ''

    @property
    def est_geocodee(self) -> bool:
        return self.latitude is not None and self.longitude is not None


@dataclass(frozen=True)
class RoofFacts:
    """
    Caractéristiques de la toiture.

    Seules la surface et la présence d'obstacles entrent dans le calcul ;
    orientation, inclinaison et type de toiture sont transmis au lead.
    """
    surface_m2: float
    obstacles: bool = False
    orientation: str = 'sud'
    inclinaison_degres: float = 30.0
    type_toiture: str = 'tuiles'

    def surface_utilisable(self, facteur_obstacles: float = 0.8) -> float:
        """Surface exploitable (m²) : réduite si la toiture comporte des obstacles."""
        return self.surface_m2 * (facteur_obstacles if self.obstacles else 1.0)


@dataclass(frozen=True)
class ConsumptionFacts:
    """
    Habitudes de consommation électrique de l'occupant.

    Attributes:
        consommation_annuelle_kwh: Consommation annuelle déclarée (optionnelle)
        facture_mensuelle: Facture mensuelle moyenne en € (optionnelle)
        type_chauffage: Type de chauffage
    """
    consommation_annuelle_kwh: Optional[float] = None
    facture_mensuelle: Optional[float] = None
    type_chauffage: TypeChauffage = TypeChauffage.AUTRE

    def __post_init__(self):
        # frozen : conversion via object.__setattr__
        object.__setattr__(
            self, 'type_chauffage', TypeChauffage.depuis_valeur(self.type_chauffage)
        )


@dataclass(frozen=True)
class PricingContext:
    """Prix d'achat effectif (€/kWh) et consommation retenue (kWh/an)."""
    prix_kwh: float
    consommation_estimee_kwh: float
    prix_personnalise: bool = False


@dataclass(frozen=True)
class PowerCandidate:
    """
    Évaluation économique d'une puissance candidate pendant la recherche.
    """
    puissance_kwc: float
    production_annuelle_kwh: float
    taux_autoconsommation_pct: float
    energie_autoconsommee_kwh: float
    energie_injectee_kwh: float
    prix_rachat_kwh: float
    economie_annuelle: float
    abonnement_mensuel: float
    profit_mensuel: float


@dataclass(frozen=True)
class PVGISDetails:
    """
    Données PVGIS associées au résultat.

    Attributes:
        production_specifique: Production spécifique (kWh/kWc/an)
        inclinaison_optimale: Inclinaison optimale (°)
        azimut_optimal: Azimut optimal (°, 180 = sud)
        pertes_systeme_pct: Pertes système (%)
        donnees_mensuelles: Série mensuelle (12 dicts) ou liste vide
        source: 'api' ou 'fallback'
    """
    production_specifique: float
    inclinaison_optimale: float
    azimut_optimal: float
    pertes_systeme_pct: float
    donnees_mensuelles: List[Dict[str, Any]] = field(default_factory=list)
    source: str = 'api'


@dataclass(frozen=True)
class SimulationResult:
    """
    Résultat complet d'une estimation de potentiel solaire.
    """
    puissance_kwc: float
    production_annuelle_kwh: float
    taux_autoconsommation_pct: float
    energie_autoconsommee_kwh: float
    energie_injectee_kwh: float
    economie_annuelle: float
    abonnement_mensuel: float
    reduction_co2_kg: float
    prix_electricite_kwh: float
    prix_rachat_kwh: float
    consommation_retenue_kwh: float
    pvgis: PVGISDetails

    def to_dict(self) -> Dict[str, Any]:
        """Convertit tout en dictionnaire (sérialisable JSON)."""
        return asdict(self)


def validate_simulation_result(result: SimulationResult, puissance_min: float, puissance_max: float) -> bool:
    """
    Vérifie qu'un résultat respecte le contrat du moteur.

    Contrat :
        - puissance dans [puissance_min, puissance_max], multiple de 0.5
        - taux d'autoconsommation entre 0 et 100
        - autoconsommée + injectée == production

    Raises:
        ValueError: Si non-conforme
    """
    if not (puissance_min <= result.puissance_kwc <= puissance_max):
        raise ValueError(
            f"Puissance hors bornes : {result.puissance_kwc} kWc "
            f"(attendu entre {puissance_min} et {puissance_max})"
        )

    if (result.puissance_kwc * 2) % 1 != 0:
        raise ValueError(f"Puissance non multiple de 0.5 : {result.puissance_kwc} kWc")

    if not (0 <= result.taux_autoconsommation_pct <= 100):
        raise ValueError(
            f"taux_autoconsommation_pct doit être entre 0-100, est {result.taux_autoconsommation_pct}"
        )

    total = result.energie_autoconsommee_kwh + result.energie_injectee_kwh
    if abs(total - result.production_annuelle_kwh) > 1e-6:
        raise ValueError(
            f"Partition énergétique incohérente : {total} != {result.production_annuelle_kwh}"
        )

    return True
