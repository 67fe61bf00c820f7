"""
Prix d'achat personnalisé de l'électricité.

Déduit le prix effectif du kWh à partir de la facture mensuelle et de la
consommation déclarées, et estime la consommation quand elle manque.
"""

import math
import logging
from typing import Optional

from ..config import EngineConfig
from ..contracts import PricingContext

logger = logging.getLogger(__name__)


class ElectricityPricing:
    """
    Calcul du contexte tarifaire d'un foyer.

    Ne lève jamais d'erreur : l'absence de données dégrade vers les
    valeurs par défaut.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    def derive(
        self,
        consommation_annuelle_kwh: Optional[float] = None,
        facture_mensuelle: Optional[float] = None
    ) -> PricingContext:
        """
        Calcule le prix effectif et la consommation retenue.

        Args:
            consommation_annuelle_kwh: Consommation annuelle déclarée (kWh)
            facture_mensuelle: Facture mensuelle moyenne (€)

        Returns:
            PricingContext

        Example:
            >>> ElectricityPricing().derive(0, 90)
            PricingContext(prix_kwh=0.1952, consommation_estimee_kwh=5533, prix_personnalise=False)
        """
        prix_defaut = self.config.prix_electricite_defaut
        consommation_connue = bool(consommation_annuelle_kwh) and consommation_annuelle_kwh > 0

        # Pas de facture : valeurs par défaut
        if not facture_mensuelle or facture_mensuelle <= 0:
            return PricingContext(
                prix_kwh=prix_defaut,
                consommation_estimee_kwh=(
                    consommation_annuelle_kwh if consommation_connue
                    else self.config.consommation_defaut_kwh
                ),
            )

        # Facture + consommation : prix réel
        if consommation_connue:
            consommation_mensuelle = consommation_annuelle_kwh / 12
            prix_personnalise = facture_mensuelle / consommation_mensuelle

            if self.config.prix_personnalise_min <= prix_personnalise <= self.config.prix_personnalise_max:
                logger.debug(f"Prix personnalisé retenu : {prix_personnalise:.4f} €/kWh")
                return PricingContext(
                    prix_kwh=prix_personnalise,
                    consommation_estimee_kwh=consommation_annuelle_kwh,
                    prix_personnalise=True,
                )

            # Prix incohérent : prix par défaut, mais on garde la consommation
            logger.warning(
                f"⚠️ Prix personnalisé incohérent ({prix_personnalise:.4f} €/kWh pour "
                f"{facture_mensuelle}€/mois et {consommation_annuelle_kwh} kWh/an), "
                f"utilisation du prix par défaut {prix_defaut} €/kWh"
            )
            return PricingContext(
                prix_kwh=prix_defaut,
                consommation_estimee_kwh=consommation_annuelle_kwh,
            )

        # Facture seule : consommation estimée = facture annuelle / prix moyen
        facture_annuelle = facture_mensuelle * 12
        consommation_estimee = math.floor(facture_annuelle / prix_defaut + 0.5)

        logger.info(
            f"📊 Consommation estimée depuis la facture : {consommation_estimee} kWh/an"
        )
        return PricingContext(
            prix_kwh=prix_defaut,
            consommation_estimee_kwh=consommation_estimee,
        )
