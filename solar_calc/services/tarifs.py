"""
Grilles tarifaires de l'offre solaire
solar_calc/services/tarifs.py

- Abonnement mensuel selon la puissance installée (grille + interpolation)
- Tarif de rachat du surplus injecté selon la puissance
"""

import math
import logging
from typing import Optional

from ..config import EngineConfig

logger = logging.getLogger(__name__)


def arrondir_puissance(puissance_kwc: float, pas_kwc: float = 0.5) -> float:
    """
    Arrondit une puissance au pas le plus proche (demi arrondi vers le haut).

    Example:
        >>> arrondir_puissance(6.25)
        6.5
        >>> arrondir_puissance(6.2)
        6.0
    """
    return math.floor(puissance_kwc / pas_kwc + 0.5) * pas_kwc


class TariffTable:
    """
    Abonnement mensuel (€ TTC) en fonction de la puissance installée.

    La grille est définie sur des puissances discrètes ; entre deux points
    on interpole linéairement, au-delà du dernier point on extrapole avec
    une progression moyenne par kWc.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self.grille = self.config.grille_dict
        self.puissances = sorted(self.grille)

    def abonnement_mensuel(self, puissance_kwc: float) -> float:
        """
        Calcule l'abonnement mensuel pour une puissance donnée.

        Args:
            puissance_kwc: Puissance installée (kWc), supposée > 0

        Returns:
            Abonnement mensuel (€)

        Example:
            >>> TariffTable().abonnement_mensuel(6.0)
            115.0
            >>> TariffTable().abonnement_mensuel(40)
            726.0
        """
        puissance = arrondir_puissance(puissance_kwc, self.config.pas_puissance_kwc)

        # Puissance présente dans la grille
        if puissance in self.grille:
            return self.grille[puissance]

        p_min = self.puissances[0]
        p_max = self.puissances[-1]

        # En dessous de la grille : tarif minimum
        if puissance < p_min:
            return self.grille[p_min]

        # Au-dessus de la grille : extrapolation linéaire
        if puissance > p_max:
            ecart = puissance - p_max
            return self.grille[p_max] + ecart * self.config.increment_abonnement_kwc

        # Interpolation entre les deux puissances encadrantes
        p1 = max(p for p in self.puissances if p <= puissance)
        p2 = min(p for p in self.puissances if p >= puissance)
        t1 = self.grille[p1]
        t2 = self.grille[p2]

        ratio = (puissance - p1) / (p2 - p1)
        return t1 + ratio * (t2 - t1)


class FeedInPricing:
    """Tarif de rachat du surplus (€/kWh) selon la puissance installée."""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def prix_rachat(self, puissance_kwc: float) -> float:
        """
        Tarif de rachat applicable.

        < seuil (9 kWc)             : tarif bas
        seuil ≤ puissance ≤ plafond : tarif haut
        > plafond (100 kWc)         : tarif haut (pas de palier supplémentaire)
        """
        if puissance_kwc < self.config.seuil_rachat_kwc:
            return self.config.prix_rachat_bas
        elif puissance_kwc <= self.config.plafond_rachat_kwc:
            return self.config.prix_rachat_haut
        return self.config.prix_rachat_haut
