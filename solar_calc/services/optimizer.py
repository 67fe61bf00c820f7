"""
Dimensionnement optimal de l'installation
solar_calc/services/optimizer.py

Recherche, par pas de 0.5 kWc, la puissance qui maximise le gain mensuel
net (économies - abonnement) sous contraintes de surface, de consommation
et de bornes réglementaires.
"""

import logging
from typing import Optional

from ..config import EngineConfig
from ..contracts import PowerCandidate
from .autoconsommation import SelfConsumptionModel
from .tarifs import TariffTable, FeedInPricing, arrondir_puissance

logger = logging.getLogger(__name__)


class PowerOptimizer:
    """
    Recherche de la puissance la plus rentable.

    Le profit en fonction de la puissance n'est pas garanti unimodal
    (interpolation de la grille tarifaire) : balayage linéaire complet.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        autoconsommation: Optional[SelfConsumptionModel] = None,
        tarifs: Optional[TariffTable] = None,
        rachat: Optional[FeedInPricing] = None
    ):
        self.config = config or EngineConfig()
        self.autoconsommation = autoconsommation or SelfConsumptionModel(self.config)
        self.tarifs = tarifs or TariffTable(self.config)
        self.rachat = rachat or FeedInPricing(self.config)

    def puissance_max_consommation(
        self,
        consommation_annuelle_kwh: float,
        production_specifique: float
    ) -> float:
        """
        Puissance maximale justifiée par la consommation.

        Production autorisée : 120% de la consommation au-delà du seuil
        grosse consommation (15 000 kWh/an), 150% sinon.
        Sans production spécifique positive, seule la puissance maximale
        réglementaire borne la recherche.
        """
        if consommation_annuelle_kwh > self.config.seuil_grosse_consommation_kwh:
            ratio = self.config.ratio_production_grosse_conso
        else:
            ratio = self.config.ratio_production_standard

        if production_specifique <= 0:
            return self.config.puissance_max_kwc

        return consommation_annuelle_kwh * ratio / production_specifique

    def plafond_recherche(
        self,
        consommation_annuelle_kwh: float,
        production_specifique: float,
        puissance_max_surface: float
    ) -> float:
        """Plus petite des limites surface / réglementaire / consommation."""
        return min(
            puissance_max_surface,
            self.config.puissance_max_kwc,
            self.puissance_max_consommation(consommation_annuelle_kwh, production_specifique)
        )

    def evaluate(
        self,
        puissance_kwc: float,
        consommation_annuelle_kwh: float,
        type_chauffage,
        production_specifique: float,
        prix_electricite: float
    ) -> PowerCandidate:
        """
        Évalue l'intérêt économique d'une puissance candidate.

        Returns:
            PowerCandidate avec production, autoconsommation et profit mensuel
        """
        production = puissance_kwc * production_specifique

        taux = self.autoconsommation.estimate(
            production,
            consommation_annuelle_kwh,
            type_chauffage,
            self.config.autoconsommation_min_pct
        )

        autoconsommee = production * taux / 100
        injectee = production - autoconsommee

        prix_rachat = self.rachat.prix_rachat(puissance_kwc)
        economie_annuelle = autoconsommee * prix_electricite + injectee * prix_rachat
        abonnement = self.tarifs.abonnement_mensuel(puissance_kwc)

        return PowerCandidate(
            puissance_kwc=puissance_kwc,
            production_annuelle_kwh=production,
            taux_autoconsommation_pct=taux,
            energie_autoconsommee_kwh=autoconsommee,
            energie_injectee_kwh=injectee,
            prix_rachat_kwh=prix_rachat,
            economie_annuelle=economie_annuelle,
            abonnement_mensuel=abonnement,
            profit_mensuel=economie_annuelle / 12 - abonnement,
        )

    def optimal_power(
        self,
        consommation_annuelle_kwh: float,
        type_chauffage,
        production_specifique: float,
        puissance_max_surface: float,
        prix_electricite: float
    ) -> float:
        """
        Calcule la puissance optimale (kWc).

        Args:
            consommation_annuelle_kwh: Consommation retenue (kWh/an)
            type_chauffage: Type de chauffage
            production_specifique: Production spécifique (kWh/kWc/an)
            puissance_max_surface: Puissance permise par la toiture (kWc)
            prix_electricite: Prix d'achat effectif (€/kWh)

        Returns:
            Puissance multiple de 0.5 dans [puissance_min, puissance_max]
        """
        cfg = self.config
        plafond = self.plafond_recherche(
            consommation_annuelle_kwh, production_specifique, puissance_max_surface
        )

        meilleur: Optional[PowerCandidate] = None
        profit_max = 0.0

        # Pas entier pour éviter la dérive des flottants
        pas = 0
        puissance = cfg.puissance_min_kwc
        while puissance <= plafond:
            candidat = self.evaluate(
                puissance,
                consommation_annuelle_kwh,
                type_chauffage,
                production_specifique,
                prix_electricite
            )
            logger.debug(
                f"{puissance:.1f} kWc : autoconso {candidat.taux_autoconsommation_pct:.0f}%, "
                f"profit {candidat.profit_mensuel:.2f}€/mois"
            )

            # Seul un profit strictement supérieur remplace le meilleur
            if candidat.profit_mensuel > profit_max:
                profit_max = candidat.profit_mensuel
                meilleur = candidat

            pas += 1
            puissance = cfg.puissance_min_kwc + pas * cfg.pas_puissance_kwc

        if meilleur is not None:
            puissance_optimale = meilleur.puissance_kwc
            logger.info(
                f"✅ Puissance optimale : {puissance_optimale} kWc "
                f"(profit {profit_max:.2f}€/mois)"
            )
        else:
            # Aucune puissance rentable : couvrir au moins 30% de la consommation
            if production_specifique > 0:
                puissance_secours = max(
                    cfg.puissance_min_kwc,
                    min(
                        plafond,
                        consommation_annuelle_kwh * cfg.couverture_min_secours / production_specifique
                    )
                )
            else:
                puissance_secours = cfg.puissance_min_kwc
            puissance_optimale = arrondir_puissance(puissance_secours, cfg.pas_puissance_kwc)
            logger.warning(
                f"⚠️ Aucune puissance rentable jusqu'à {plafond:.1f} kWc, "
                f"puissance de secours : {puissance_optimale} kWc"
            )

        puissance_optimale = max(cfg.puissance_min_kwc, min(cfg.puissance_max_kwc, puissance_optimale))
        return arrondir_puissance(puissance_optimale, cfg.pas_puissance_kwc)
