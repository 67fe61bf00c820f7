"""
Client API PVGIS pour estimer la production photovoltaïque d'un site.

Documentation PVGIS 5.3 : https://joint-research-centre.ec.europa.eu/photovoltaic-geographical-information-system-pvgis/getting-started-pvgis/pvgis-user-manual_en
API Documentation : https://joint-research-centre.ec.europa.eu/pvgis-tools/api_en
"""

import requests
import json
from typing import Dict, Optional
import logging

from ..contracts import (
    ProductionData,
    arrondi_demi_haut,
    production_par_defaut,
    monthly_to_dataframe,
    validate_monthly_dataframe,
    INCLINAISON_DEFAUT,
    AZIMUT_DEFAUT,
    PERTES_SYSTEME_DEFAUT,
)

logger = logging.getLogger(__name__)


class PVGISClient:
    """
    Client pour l'API PVGIS 5.3 (Photovoltaic Geographical Information System).

    PVGIS est une API gratuite du JRC (Joint Research Centre) de la Commission Européenne.
    Seul l'endpoint PVcalc (production d'un système raccordé au réseau) est utilisé.
    """

    # URL de base de l'API PVGIS 5.3
    BASE_URL = "https://re.jrc.ec.europa.eu/api/v5_3"

    DATABASES = {
        'PVGIS-SARAH2': 'Europe, Afrique, Asie (2005-2020)',
        'PVGIS-SARAH3': 'Europe, Afrique, Asie (2005-2022) - Recommandé',
        'PVGIS-NSRDB': 'Amériques (1998-2020)',
        'PVGIS-ERA5': 'Mondial (2005-2020)',
    }

    def __init__(
        self,
        timeout: Optional[int] = None,
        raddatabase: str = 'PVGIS-SARAH3',
        pertes_systeme_pct: float = PERTES_SYSTEME_DEFAUT
    ):
        """
        Initialise le client PVGIS.

        Args:
            timeout: Timeout HTTP en secondes (défaut : settings.PVGIS_TIMEOUT ou 60s)
            raddatabase: Base de données de rayonnement
            pertes_systeme_pct: Pertes système déclarées à PVGIS (%)
        """
        if timeout is None:
            from django.conf import settings
            timeout = getattr(settings, 'PVGIS_TIMEOUT', 60)

        self.timeout = timeout
        self.raddatabase = raddatabase
        self.pertes_systeme_pct = pertes_systeme_pct
        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': 'SimulateurSolaire/1.0 (Python; PVGIS Client)'
        })

    def get_pv_calc(
        self,
        latitude: float,
        longitude: float,
        peakpower: float,
        **kwargs
    ) -> Dict:
        """
        Appelle l'endpoint PVcalc pour une installation fixe à angles optimaux.

        Args:
            latitude: Latitude en degrés décimaux (-90 à 90)
            longitude: Longitude en degrés décimaux (-180 à 180)
            peakpower: Puissance crête installée (kWc)
            **kwargs: Paramètres PVGIS supplémentaires

        Returns:
            dict: Réponse JSON brute

        Raises:
            requests.RequestException: Erreur lors de l'appel API
            ValueError: Coordonnées invalides ou réponse non JSON
        """
        if not -90 <= latitude <= 90:
            raise ValueError(f"Latitude invalide: {latitude} (doit être entre -90 et 90)")
        if not -180 <= longitude <= 180:
            raise ValueError(f"Longitude invalide: {longitude} (doit être entre -180 et 180)")
        if peakpower <= 0:
            raise ValueError(f"Puissance crête invalide: {peakpower} kWc")

        params = {
            'lat': latitude,
            'lon': longitude,
            'peakpower': peakpower,
            'loss': self.pertes_systeme_pct,
            'optimalangles': 1,
            'usehorizon': 1,
            'trackingtype': 0,
            'outputformat': 'json',
        }
        if self.raddatabase in self.DATABASES:
            params['raddatabase'] = self.raddatabase
        params.update(kwargs)

        url = f"{self.BASE_URL}/PVcalc"

        logger.info(f"Appel PVGIS 5.3 PVcalc pour {latitude}, {longitude} ({peakpower} kWc)")
        logger.debug(f"Paramètres: {params}")

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()

        except requests.exceptions.Timeout:
            logger.error(f"Timeout lors de l'appel PVGIS (>{self.timeout}s)")
            raise
        except requests.exceptions.HTTPError as e:
            logger.error(f"Erreur HTTP {e.response.status_code}: {e}")
            logger.error(f"Réponse: {e.response.text[:500]}")
            raise
        except json.JSONDecodeError as e:
            logger.error(f"Erreur de parsing JSON: {e}")
            raise ValueError("Réponse PVGIS invalide (pas du JSON)")
        except requests.exceptions.RequestException as e:
            logger.error(f"Erreur lors de l'appel PVGIS: {e}")
            raise

    def parse_pv_calc(self, data: Dict, peakpower: float) -> ProductionData:
        """
        Extrait la production et les angles optimaux d'une réponse PVcalc.

        PVGIS exprime l'azimut (aspect) avec 0 = sud, -90 = est ; il est
        converti en cap (180 = sud).

        Une série mensuelle non conforme est ignorée ; les totaux annuels
        sont conservés.

        Raises:
            KeyError: Totaux annuels absents de la réponse
        """
        production_annuelle = data['outputs']['totals']['fixed']['E_y']

        inputs = data.get('inputs', {})
        montage = inputs.get('mounting_system', {}).get('fixed', {})
        inclinaison = montage.get('slope', {}).get('value', INCLINAISON_DEFAUT)
        aspect = montage.get('azimuth', {}).get('value')
        azimut = AZIMUT_DEFAUT if aspect is None else (aspect + 180) % 360
        pertes = inputs.get('pv_module', {}).get('system_loss', self.pertes_systeme_pct)

        mensuel = data['outputs'].get('monthly', {}).get('fixed', [])
        donnees_mensuelles = []
        if mensuel:
            try:
                df = monthly_to_dataframe(mensuel)
                validate_monthly_dataframe(df)
                donnees_mensuelles = df.to_dict('records')
            except (ValueError, KeyError, TypeError) as e:
                logger.warning(f"⚠️ Série mensuelle PVGIS ignorée: {e}")

        return ProductionData(
            production_annuelle_kwh=arrondi_demi_haut(production_annuelle),
            production_specifique=arrondi_demi_haut(production_annuelle / peakpower),
            inclinaison_optimale=inclinaison,
            azimut_optimal=azimut,
            pertes_systeme_pct=pertes,
            donnees_mensuelles=donnees_mensuelles,
            source='api',
        )

    def get_production_data(
        self,
        latitude: float,
        longitude: float,
        puissance_crete_kwc: float
    ) -> ProductionData:
        """
        Production estimée d'une installation, sans jamais échouer.

        En cas d'erreur (réseau, timeout, réponse inattendue), retourne les
        valeurs par défaut : 1200 kWh/kWc/an, 30°, 180°, 14% de pertes.

        Args:
            latitude: Latitude
            longitude: Longitude
            puissance_crete_kwc: Puissance crête (kWc)

        Returns:
            ProductionData
        """
        try:
            data = self.get_pv_calc(latitude, longitude, puissance_crete_kwc)
            production = self.parse_pv_calc(data, puissance_crete_kwc)
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            logger.warning(f"⚠️ PVGIS indisponible, utilisation des valeurs par défaut: {e}")
            return production_par_defaut(puissance_crete_kwc)

        logger.info(
            f"📊 PVGIS : {production.production_annuelle_kwh:.0f} kWh/an "
            f"({production.production_specifique:.0f} kWh/kWc)"
        )
        return production
