"""
Tests de la commande `manage.py simuler`
solar_calc/tests/test_command.py
"""

import json
import unittest
from io import StringIO
from unittest.mock import patch

from django.core.management import call_command
from django.core.management.base import CommandError

from solar_calc.tests.stubs import IrradianceStub
from weather.services.geocoding import AdresseSuggestion


class TestCommandeSimuler(unittest.TestCase):

    def setUp(self):
        self.irradiance = IrradianceStub(production_specifique=1200)
        patcher = patch(
            'weather.services.pvgis.PVGISClient.get_production_data',
            side_effect=self.irradiance.get_production_data,
        )
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_sortie_json(self):
        out = StringIO()
        call_command(
            'simuler',
            '--latitude', '45.75', '--longitude', '4.85',
            '--surface', '50', '--consommation', '4000', '--facture', '120',
            '--chauffage', 'electrique', '--json',
            stdout=out,
        )
        data = json.loads(out.getvalue())

        self.assertEqual(data['puissance_kwc'], 5.0)
        self.assertEqual(data['abonnement_mensuel'], 96)

    def test_sortie_texte(self):
        out = StringIO()
        call_command(
            'simuler', '--latitude', '45.75', '--longitude', '4.85', '--surface', '50',
            stdout=out,
        )
        self.assertIn('Puissance recommandée', out.getvalue())

    def test_sans_adresse(self):
        with self.assertRaises(CommandError):
            call_command('simuler', '--surface', '50', stdout=StringIO())
        self.assertEqual(self.irradiance.appels, [])

    def test_adresse_geocodee(self):
        suggestion = AdresseSuggestion(
            label='8 Boulevard du Port 80000 Amiens', ville='Amiens', code_postal='80000',
            latitude=49.897, longitude=2.29,
        )
        with patch('weather.services.geocoding.AdresseClient.search', return_value=[suggestion]):
            call_command(
                'simuler', '--adresse', '8 bd du port Amiens', '--surface', '40', '--obstacles',
                stdout=StringIO(),
            )

        self.assertEqual(self.irradiance.appels[0], (49.897, 2.29, 1.0))

    def test_adresse_introuvable(self):
        with patch('weather.services.geocoding.AdresseClient.search', return_value=[]):
            with self.assertRaises(CommandError):
                call_command('simuler', '--adresse', 'nulle part', '--surface', '40',
                             stdout=StringIO())


if __name__ == '__main__':
    unittest.main()
