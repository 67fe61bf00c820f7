"""
Tests du service d'estimation du potentiel solaire
solar_calc/tests/test_simulation.py
"""

import json
import unittest

from solar_calc.config import EngineConfig
from solar_calc.contracts import (
    Localisation,
    RoofFacts,
    ConsumptionFacts,
    TypeChauffage,
    validate_simulation_result,
)
from solar_calc.exceptions import MissingLocationError
from solar_calc.services.simulation import SolarPotentialEstimator
from solar_calc.tests.stubs import IrradianceStub


LYON = Localisation(latitude=45.75, longitude=4.85, ville='Lyon', code_postal='69001')


class TestSolarPotentialEstimator(unittest.TestCase):

    def setUp(self):
        self.config = EngineConfig()
        self.irradiance = IrradianceStub(production_specifique=1200)
        self.estimator = SolarPotentialEstimator(irradiance=self.irradiance, config=self.config)

    def test_puissance_max_surface(self):
        self.assertEqual(self.estimator.puissance_max_surface(RoofFacts(surface_m2=50)), 30)
        self.assertEqual(
            self.estimator.puissance_max_surface(RoofFacts(surface_m2=50, obstacles=True)), 24
        )
        self.assertEqual(self.estimator.puissance_max_surface(RoofFacts(surface_m2=12)), 7)

    def test_scenario_complet(self):
        """
        50 m² sans obstacle, 4000 kWh/an, 120€/mois, chauffage électrique,
        1200 kWh/kWc/an
        """
        result = self.estimator.estimate(
            LYON,
            RoofFacts(surface_m2=50),
            ConsumptionFacts(
                consommation_annuelle_kwh=4000,
                facture_mensuelle=120,
                type_chauffage=TypeChauffage.ELECTRIQUE,
            ),
        )

        self.assertEqual(result.puissance_kwc, 5.0)
        self.assertEqual(result.production_annuelle_kwh, 6000)
        self.assertEqual(result.taux_autoconsommation_pct, 70)
        self.assertEqual(result.economie_annuelle, 1584)
        self.assertEqual(result.abonnement_mensuel, 96)
        self.assertEqual(result.reduction_co2_kg, 474)
        self.assertAlmostEqual(result.prix_electricite_kwh, 0.36)
        self.assertEqual(result.prix_rachat_kwh, 0.04)
        self.assertGreater(result.economie_annuelle / 12 - result.abonnement_mensuel, 0)

        # Un appel à 1 kWc puis un appel à la puissance retenue
        self.assertEqual(self.irradiance.appels, [(45.75, 4.85, 1.0), (45.75, 4.85, 5.0)])

    def test_partition_energetique(self):
        result = self.estimator.estimate(
            LYON,
            RoofFacts(surface_m2=80, obstacles=True),
            ConsumptionFacts(consommation_annuelle_kwh=11000, facture_mensuelle=190,
                             type_chauffage='gaz'),
        )

        self.assertAlmostEqual(
            result.energie_autoconsommee_kwh + result.energie_injectee_kwh,
            result.production_annuelle_kwh
        )
        self.assertTrue(validate_simulation_result(result, 2.5, 36.0))

    def test_coordonnees_manquantes(self):
        """Aucun appel PVGIS sans coordonnées"""
        with self.assertRaises(MissingLocationError):
            self.estimator.estimate(
                Localisation(latitude=None, longitude=4.85),
                RoofFacts(surface_m2=50),
                ConsumptionFacts(consommation_annuelle_kwh=4000),
            )

        with self.assertRaises(MissingLocationError):
            self.estimator.estimate(
                Localisation(latitude=45.75),
                RoofFacts(surface_m2=50),
                ConsumptionFacts(consommation_annuelle_kwh=4000),
            )

        self.assertEqual(self.irradiance.appels, [])

    def test_coordonnees_nulles_acceptees(self):
        """Latitude 0 est une coordonnée valide"""
        result = self.estimator.estimate(
            Localisation(latitude=0.0, longitude=0.0),
            RoofFacts(surface_m2=30),
            ConsumptionFacts(consommation_annuelle_kwh=3000),
        )
        self.assertGreaterEqual(result.puissance_kwc, 2.5)

    def test_idempotence(self):
        args = (
            LYON,
            RoofFacts(surface_m2=60),
            ConsumptionFacts(consommation_annuelle_kwh=7000, facture_mensuelle=130,
                             type_chauffage='fioul'),
        )

        self.assertEqual(self.estimator.estimate(*args), self.estimator.estimate(*args))

    def test_consommation_estimee_depuis_facture(self):
        result = self.estimator.estimate(
            LYON,
            RoofFacts(surface_m2=50),
            ConsumptionFacts(consommation_annuelle_kwh=0, facture_mensuelle=90,
                             type_chauffage='gaz'),
        )

        self.assertEqual(result.consommation_retenue_kwh, 5533)
        self.assertEqual(result.prix_electricite_kwh, 0.1952)

    def test_donnees_pvgis_par_defaut_propagees(self):
        estimator = SolarPotentialEstimator(
            irradiance=IrradianceStub(source='fallback'), config=self.config
        )
        result = estimator.estimate(LYON, RoofFacts(surface_m2=40), ConsumptionFacts())

        self.assertEqual(result.pvgis.source, 'fallback')
        self.assertEqual(result.pvgis.production_specifique, 1200)
        self.assertEqual(result.pvgis.inclinaison_optimale, 30)
        self.assertEqual(result.pvgis.azimut_optimal, 180)
        self.assertEqual(result.pvgis.pertes_systeme_pct, 14)

    def test_production_specifique_nulle(self):
        estimator = SolarPotentialEstimator(
            irradiance=IrradianceStub(production_specifique=0), config=self.config
        )
        result = estimator.estimate(
            LYON, RoofFacts(surface_m2=50), ConsumptionFacts(consommation_annuelle_kwh=4000)
        )

        self.assertEqual(result.puissance_kwc, 2.5)
        self.assertEqual(result.production_annuelle_kwh, 0)
        self.assertEqual(result.economie_annuelle, 0)
        self.assertEqual(result.abonnement_mensuel, 49)
        self.assertTrue(validate_simulation_result(result, 2.5, 36))

    def test_serialisation_json(self):
        result = self.estimator.estimate(
            LYON, RoofFacts(surface_m2=50), ConsumptionFacts(consommation_annuelle_kwh=4000)
        )
        data = json.loads(json.dumps(result.to_dict()))

        self.assertEqual(data['puissance_kwc'], result.puissance_kwc)
        self.assertEqual(data['pvgis']['source'], 'api')


class TestValidationResultat(unittest.TestCase):

    def setUp(self):
        self.estimator = SolarPotentialEstimator(irradiance=IrradianceStub(), config=EngineConfig())
        self.result = self.estimator.estimate(
            LYON, RoofFacts(surface_m2=50), ConsumptionFacts(consommation_annuelle_kwh=4000)
        )

    def test_puissance_hors_bornes(self):
        with self.assertRaises(ValueError):
            validate_simulation_result(self.result, 6.0, 36.0)

    def test_partition_incoherente(self):
        from dataclasses import replace

        faux = replace(self.result, energie_injectee_kwh=self.result.energie_injectee_kwh + 1)
        with self.assertRaises(ValueError):
            validate_simulation_result(faux, 2.5, 36.0)


if __name__ == '__main__':
    unittest.main()
