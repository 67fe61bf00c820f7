"""
Service de Simulation Solaire

Estime le potentiel d'une toiture : puissance optimale, production,
autoconsommation, économies, abonnement mensuel et CO2 évité.

App Django: solar_calc
"""

import math
import logging
from typing import Optional

from weather.contracts import arrondi_demi_haut as _arrondi

from ..config import EngineConfig, load_engine_config
from ..contracts import (
    Localisation,
    RoofFacts,
    ConsumptionFacts,
    PVGISDetails,
    SimulationResult,
)
from ..exceptions import MissingLocationError
from .autoconsommation import SelfConsumptionModel
from .electricity_pricing import ElectricityPricing
from .optimizer import PowerOptimizer
from .tarifs import TariffTable, FeedInPricing

logger = logging.getLogger(__name__)


class SolarPotentialEstimator:
    """
    Service principal d'estimation du potentiel solaire.

    Ce service orchestre :
    - Le calcul de la puissance permise par la toiture
    - La récupération de la production spécifique (PVGIS, à 1 kWc)
    - Le calcul du prix personnalisé de l'électricité
    - La recherche de la puissance optimale
    - Le calcul final à la puissance retenue (second appel PVGIS)

    Le service ne conserve aucun état entre deux estimations.
    """

    PUISSANCE_NOMINALE_KWC = 1.0

    def __init__(self, irradiance=None, config: Optional[EngineConfig] = None):
        """
        Args:
            irradiance: Collaborateur exposant get_production_data(lat, lon, kwc)
                        (défaut : PVGISClient)
            config: Constantes du moteur (défaut : load_engine_config())
        """
        if irradiance is None:
            from weather.services.pvgis import PVGISClient
            irradiance = PVGISClient()

        self.irradiance = irradiance
        self.config = config or load_engine_config()
        self.tarifs = TariffTable(self.config)
        self.rachat = FeedInPricing(self.config)
        self.pricing = ElectricityPricing(self.config)
        self.autoconsommation = SelfConsumptionModel(self.config)
        self.optimizer = PowerOptimizer(
            self.config,
            autoconsommation=self.autoconsommation,
            tarifs=self.tarifs,
            rachat=self.rachat,
        )

    def puissance_max_surface(self, toiture: RoofFacts) -> float:
        """Puissance installable sur la surface utilisable (kWc, arrondi inférieur)."""
        surface = toiture.surface_utilisable(self.config.facteur_surface_obstacles)
        return math.floor(surface * self.config.densite_puissance_kwc_m2)

    def estimate(
        self,
        localisation: Localisation,
        toiture: RoofFacts,
        consommation: ConsumptionFacts
    ) -> SimulationResult:
        """
        Exécute une estimation complète.

        Args:
            localisation: Adresse géocodée
            toiture: Caractéristiques de la toiture
            consommation: Habitudes de consommation

        Returns:
            SimulationResult

        Raises:
            MissingLocationError: Latitude ou longitude absente
        """
        if not localisation.est_geocodee:
            raise MissingLocationError()

        latitude = localisation.latitude
        longitude = localisation.longitude

        puissance_max_surface = self.puissance_max_surface(toiture)

        # Production spécifique du site (kWh/kWc/an)
        production_nominale = self.irradiance.get_production_data(
            latitude, longitude, self.PUISSANCE_NOMINALE_KWC
        )
        production_specifique = production_nominale.production_specifique

        contexte = self.pricing.derive(
            consommation.consommation_annuelle_kwh,
            consommation.facture_mensuelle
        )

        puissance = self.optimizer.optimal_power(
            contexte.consommation_estimee_kwh,
            consommation.type_chauffage,
            production_specifique,
            puissance_max_surface,
            contexte.prix_kwh
        )

        # Production réelle à la puissance retenue
        production = self.irradiance.get_production_data(latitude, longitude, puissance)
        production_annuelle = production.production_annuelle_kwh

        taux = self.autoconsommation.estimate(
            production_annuelle,
            contexte.consommation_estimee_kwh,
            consommation.type_chauffage,
            self.config.autoconsommation_min_pct
        )

        autoconsommee = production_annuelle * taux / 100
        injectee = production_annuelle - autoconsommee
        prix_rachat = self.rachat.prix_rachat(puissance)

        # Économies = facture évitée + revente du surplus
        economie_facture = autoconsommee * contexte.prix_kwh
        revenu_revente = injectee * prix_rachat

        result = SimulationResult(
            puissance_kwc=puissance,
            production_annuelle_kwh=production_annuelle,
            taux_autoconsommation_pct=taux,
            energie_autoconsommee_kwh=autoconsommee,
            energie_injectee_kwh=injectee,
            economie_annuelle=_arrondi(economie_facture + revenu_revente),
            abonnement_mensuel=_arrondi(self.tarifs.abonnement_mensuel(puissance)),
            reduction_co2_kg=_arrondi(production_annuelle * self.config.facteur_co2_kg_kwh),
            prix_electricite_kwh=contexte.prix_kwh,
            prix_rachat_kwh=prix_rachat,
            consommation_retenue_kwh=contexte.consommation_estimee_kwh,
            pvgis=PVGISDetails(
                production_specifique=production.production_specifique,
                inclinaison_optimale=production.inclinaison_optimale,
                azimut_optimal=production.azimut_optimal,
                pertes_systeme_pct=production.pertes_systeme_pct,
                donnees_mensuelles=list(production.donnees_mensuelles),
                source=production.source,
            ),
        )

        logger.info(
            f"☀️ Simulation {localisation.ville or (latitude, longitude)} : "
            f"{result.puissance_kwc} kWc, {result.production_annuelle_kwh:.0f} kWh/an, "
            f"autoconso {result.taux_autoconsommation_pct:.0f}%, "
            f"économies {result.economie_annuelle}€/an, "
            f"abonnement {result.abonnement_mensuel}€/mois"
        )

        return result


def estimer_potentiel_solaire(
    localisation: Localisation,
    toiture: RoofFacts,
    consommation: ConsumptionFacts,
    irradiance=None
) -> SimulationResult:
    """
    Fonction helper pour lancer une estimation avec la configuration du projet.

    Example:
        >>> from solar_calc.contracts import Localisation, RoofFacts, ConsumptionFacts
        >>> result = estimer_potentiel_solaire(
        ...     Localisation(latitude=45.75, longitude=4.85, ville='Lyon'),
        ...     RoofFacts(surface_m2=50),
        ...     ConsumptionFacts(consommation_annuelle_kwh=4000, facture_mensuelle=120,
        ...                      type_chauffage='electrique'),
        ... )
        >>> print(f"{result.puissance_kwc} kWc - {result.economie_annuelle}€/an")
    """
    return SolarPotentialEstimator(irradiance=irradiance).estimate(
        localisation, toiture, consommation
    )
