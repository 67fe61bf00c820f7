"""
Tests du client PVGIS (réseau simulé)
weather/tests/test_pvgis.py
"""

import unittest
from unittest.mock import MagicMock

import requests

from weather.contracts import monthly_to_dataframe, validate_monthly_dataframe
from weather.services.pvgis import PVGISClient


def reponse_pvcalc(e_y=1234.6, slope=37, aspect=-2, mois=12):
    """Réponse PVcalc réduite aux champs utilisés."""
    return {
        'inputs': {
            'mounting_system': {
                'fixed': {
                    'slope': {'value': slope, 'optimal': True},
                    'azimuth': {'value': aspect, 'optimal': True},
                }
            },
            'pv_module': {'technology': 'c-Si', 'peak_power': 1.0, 'system_loss': 14.0},
        },
        'outputs': {
            'monthly': {
                'fixed': [
                    {
                        'month': m,
                        'E_d': 3.0 + m / 10,
                        'E_m': 90.0 + m,
                        'H(i)_d': 4.0,
                        'H(i)_m': 120.0,
                        'SD_m': 8.5,
                    }
                    for m in range(mois, 0, -1)
                ]
            },
            'totals': {'fixed': {'E_y': e_y, 'E_d': 3.38, 'H(i)_y': 1600.0}},
        },
    }


class TestPVGISClient(unittest.TestCase):

    def setUp(self):
        self.client = PVGISClient(timeout=5)
        self.client.session = MagicMock()
        self.response = MagicMock()
        self.client.session.get.return_value = self.response

    def test_parametres_pvcalc(self):
        self.response.json.return_value = reponse_pvcalc()
        self.client.get_pv_calc(45.75, 4.85, 3.5)

        url = self.client.session.get.call_args.args[0]
        params = self.client.session.get.call_args.kwargs['params']
        self.assertTrue(url.endswith('/PVcalc'))
        self.assertEqual(params['peakpower'], 3.5)
        self.assertEqual(params['loss'], 14.0)
        self.assertEqual(params['optimalangles'], 1)
        self.assertEqual(params['raddatabase'], 'PVGIS-SARAH3')
        self.assertEqual(self.client.session.get.call_args.kwargs['timeout'], 5)

    def test_production_depuis_api(self):
        self.response.json.return_value = reponse_pvcalc(e_y=1234.6)
        production = self.client.get_production_data(45.75, 4.85, 1.0)

        self.assertEqual(production.source, 'api')
        self.assertEqual(production.production_annuelle_kwh, 1235)
        self.assertEqual(production.production_specifique, 1235)
        self.assertEqual(production.inclinaison_optimale, 37)
        self.assertEqual(production.azimut_optimal, 178)
        self.assertEqual(production.pertes_systeme_pct, 14.0)

    def test_production_specifique_par_kwc(self):
        self.response.json.return_value = reponse_pvcalc(e_y=6120.0)
        production = self.client.get_production_data(45.75, 4.85, 5.0)

        self.assertEqual(production.production_annuelle_kwh, 6120)
        self.assertEqual(production.production_specifique, 1224)

    def test_serie_mensuelle_triee(self):
        self.response.json.return_value = reponse_pvcalc()
        production = self.client.get_production_data(45.75, 4.85, 1.0)

        self.assertEqual(len(production.donnees_mensuelles), 12)
        self.assertEqual(production.donnees_mensuelles[0]['mois'], 1)
        self.assertEqual(production.donnees_mensuelles[0]['production_kwh'], 91.0)
        self.assertIn('irradiation_kwh_m2', production.donnees_mensuelles[0])

    def test_indisponibilite_reseau(self):
        """Erreur réseau : valeurs par défaut, jamais d'exception"""
        self.client.session.get.side_effect = requests.ConnectionError('PVGIS down')

        with self.assertLogs('weather.services.pvgis', level='WARNING'):
            production = self.client.get_production_data(45.75, 4.85, 5.0)

        self.assertEqual(production.source, 'fallback')
        self.assertEqual(production.production_annuelle_kwh, 6000)
        self.assertEqual(production.production_specifique, 1200)
        self.assertEqual(production.inclinaison_optimale, 30)
        self.assertEqual(production.azimut_optimal, 180)
        self.assertEqual(production.pertes_systeme_pct, 14)
        self.assertEqual(production.donnees_mensuelles, [])

    def test_timeout(self):
        self.client.session.get.side_effect = requests.Timeout()
        self.assertEqual(self.client.get_production_data(45.75, 4.85, 2.5).source, 'fallback')

    def test_reponse_inattendue(self):
        self.response.json.return_value = {'message': 'location over the sea'}
        self.assertEqual(self.client.get_production_data(45.75, 4.85, 1.0).source, 'fallback')

    def test_serie_mensuelle_incomplete(self):
        """Série mensuelle non conforme : totaux annuels conservés, série vide"""
        self.response.json.return_value = reponse_pvcalc(e_y=1450.0, mois=11)

        with self.assertLogs('weather.services.pvgis', level='WARNING'):
            production = self.client.get_production_data(43.3, 5.4, 1.0)

        self.assertEqual(production.source, 'api')
        self.assertEqual(production.production_annuelle_kwh, 1450)
        self.assertEqual(production.production_specifique, 1450)
        self.assertEqual(production.inclinaison_optimale, 37)
        self.assertEqual(production.azimut_optimal, 178)
        self.assertEqual(production.donnees_mensuelles, [])

    def test_serie_mensuelle_sans_production(self):
        data = reponse_pvcalc(e_y=1450.0)
        for ligne in data['outputs']['monthly']['fixed']:
            del ligne['E_m']
        self.response.json.return_value = data

        production = self.client.get_production_data(43.3, 5.4, 1.0)

        self.assertEqual(production.source, 'api')
        self.assertEqual(production.production_specifique, 1450)
        self.assertEqual(production.donnees_mensuelles, [])

    def test_serie_mensuelle_valeur_manquante(self):
        data = reponse_pvcalc(e_y=1450.0)
        data['outputs']['monthly']['fixed'][3]['E_m'] = None
        self.response.json.return_value = data

        production = self.client.get_production_data(43.3, 5.4, 1.0)

        self.assertEqual(production.source, 'api')
        self.assertEqual(production.production_annuelle_kwh, 1450)
        self.assertEqual(production.donnees_mensuelles, [])

    def test_arrondi_demi_vers_le_haut(self):
        """1234.5 kWh → 1235 ; 6122.5 / 5 = 1224.5 → 1225"""
        self.response.json.return_value = reponse_pvcalc(e_y=1234.5)
        production = self.client.get_production_data(45.75, 4.85, 1.0)
        self.assertEqual(production.production_annuelle_kwh, 1235)
        self.assertEqual(production.production_specifique, 1235)

        self.response.json.return_value = reponse_pvcalc(e_y=6122.5)
        production = self.client.get_production_data(45.75, 4.85, 5.0)
        self.assertEqual(production.production_annuelle_kwh, 6123)
        self.assertEqual(production.production_specifique, 1225)

    def test_coordonnees_invalides(self):
        with self.assertRaises(ValueError):
            self.client.get_pv_calc(120.0, 4.85, 1.0)

        production = self.client.get_production_data(120.0, 4.85, 1.0)
        self.assertEqual(production.source, 'fallback')
        self.client.session.get.assert_not_called()


class TestContratMensuel(unittest.TestCase):

    def test_dataframe_valide(self):
        df = monthly_to_dataframe(reponse_pvcalc()['outputs']['monthly']['fixed'])

        self.assertTrue(validate_monthly_dataframe(df))
        self.assertEqual(list(df['mois']), list(range(1, 13)))

    def test_production_negative(self):
        mensuel = reponse_pvcalc()['outputs']['monthly']['fixed']
        mensuel[0]['E_m'] = -1.0

        with self.assertRaises(ValueError):
            validate_monthly_dataframe(monthly_to_dataframe(mensuel))


if __name__ == '__main__':
    unittest.main()
