"""
Estimation du taux d'autoconsommation
solar_calc/services/autoconsommation.py

Heuristique fondée sur le ratio production / consommation et le type de
chauffage : une petite installation (relativement à la consommation)
autoconsomme une plus grande part de sa production.
"""

from typing import Optional

from ..config import EngineConfig
from ..contracts import TypeChauffage


# Taux de base selon le chauffage (%), jamais inférieur au minimum garanti
TAUX_BASE_CHAUFFAGE = {
    TypeChauffage.ELECTRIQUE: 65.0,  # Plus de consommation diurne
    TypeChauffage.GAZ: 60.0,
    TypeChauffage.FIOUL: 60.0,
}

# (ratio production/consommation max, bonus %, plafond %)
PALIERS_RATIO = (
    (0.5, 20.0, 85.0),
    (1.0, 10.0, 75.0),
    (1.5, 5.0, 70.0),
)


class SelfConsumptionModel:
    """Taux d'autoconsommation estimé d'une installation."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def estimate(
        self,
        production_annuelle_kwh: float,
        consommation_annuelle_kwh: float,
        type_chauffage,
        minimum_garanti_pct: Optional[float] = None
    ) -> float:
        """
        Calcule le taux d'autoconsommation (%).

        Args:
            production_annuelle_kwh: Production annuelle (kWh)
            consommation_annuelle_kwh: Consommation annuelle (kWh)
            type_chauffage: TypeChauffage ou valeur texte
            minimum_garanti_pct: Minimum garanti (défaut : configuration)

        Returns:
            Taux entre minimum_garanti_pct et 100
        """
        if minimum_garanti_pct is None:
            minimum_garanti_pct = self.config.autoconsommation_min_pct

        if consommation_annuelle_kwh > 0:
            ratio = production_annuelle_kwh / consommation_annuelle_kwh
        else:
            ratio = float('inf')

        chauffage = TypeChauffage.depuis_valeur(type_chauffage)
        taux_base = max(
            minimum_garanti_pct,
            TAUX_BASE_CHAUFFAGE.get(chauffage, minimum_garanti_pct)
        )

        taux = taux_base
        for ratio_max, bonus, plafond in PALIERS_RATIO:
            if ratio <= ratio_max:
                taux = min(plafond, taux_base + bonus)
                break

        return min(100.0, max(minimum_garanti_pct, taux))
