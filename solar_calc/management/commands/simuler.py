# solar_calc/management/commands/simuler.py
"""
Commande Django pour estimer le potentiel solaire d'une toiture.

Usage:
    python manage.py simuler --latitude 45.75 --longitude 4.85 --surface 50 \
        --consommation 4000 --facture 120 --chauffage electrique
    python manage.py simuler --adresse "8 bd du port Amiens" --surface 40 --obstacles --json
"""

import json

from django.core.management.base import BaseCommand, CommandError

from solar_calc.contracts import Localisation, RoofFacts, ConsumptionFacts, TypeChauffage
from solar_calc.exceptions import MissingLocationError
from solar_calc.services.simulation import SolarPotentialEstimator


class Command(BaseCommand):
    help = "Estime la puissance optimale, la production et les économies d'une toiture"

    def add_arguments(self, parser):
        parser.add_argument('--latitude', type=float, help='Latitude (degrés décimaux)')
        parser.add_argument('--longitude', type=float, help='Longitude (degrés décimaux)')
        parser.add_argument('--adresse', help='Adresse à géocoder (si pas de coordonnées)')
        parser.add_argument('--surface', type=float, required=True, help='Surface de toiture (m²)')
        parser.add_argument('--obstacles', action='store_true', help='Toiture avec obstacles')
        parser.add_argument('--consommation', type=float, help='Consommation annuelle (kWh)')
        parser.add_argument('--facture', type=float, help='Facture mensuelle moyenne (€)')
        parser.add_argument(
            '--chauffage',
            choices=[t.value for t in TypeChauffage],
            default=TypeChauffage.AUTRE.value,
            help='Type de chauffage',
        )
        parser.add_argument('--json', action='store_true', help='Sortie JSON')

    def handle(self, *args, **options):
        if options['surface'] <= 0:
            raise CommandError('La surface de toiture doit être positive')

        localisation = self.resoudre_localisation(options)
        toiture = RoofFacts(surface_m2=options['surface'], obstacles=options['obstacles'])
        consommation = ConsumptionFacts(
            consommation_annuelle_kwh=options['consommation'],
            facture_mensuelle=options['facture'],
            type_chauffage=options['chauffage'],
        )

        try:
            result = SolarPotentialEstimator().estimate(localisation, toiture, consommation)
        except MissingLocationError as e:
            raise CommandError(f"{e}. Sélectionnez une adresse (--adresse) ou des coordonnées.")

        if options['json']:
            self.stdout.write(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
            return

        self.stdout.write(self.style.SUCCESS('☀️ Résultats de votre simulation'))
        self.stdout.write(f"   Puissance recommandée : {result.puissance_kwc} kWc")
        self.stdout.write(f"   Production annuelle   : {result.production_annuelle_kwh:.0f} kWh")
        self.stdout.write(f"   Autoconsommation      : {result.taux_autoconsommation_pct:.0f} %")
        self.stdout.write(f"   Économies annuelles   : {result.economie_annuelle} €")
        self.stdout.write(f"   Abonnement mensuel    : {result.abonnement_mensuel} €")
        self.stdout.write(f"   CO2 évité             : {result.reduction_co2_kg} kg/an")
        if result.pvgis.source == 'fallback':
            self.stdout.write(self.style.WARNING('⚠️ PVGIS indisponible : valeurs par défaut utilisées'))

    def resoudre_localisation(self, options) -> Localisation:
        """Coordonnées explicites, sinon première suggestion du géocodage."""
        if options['latitude'] is not None or options['longitude'] is not None:
            return Localisation(latitude=options['latitude'], longitude=options['longitude'])

        if options['adresse']:
            from weather.services.geocoding import AdresseClient

            suggestions = AdresseClient().search(options['adresse'], limit=1)
            if suggestions:
                self.stdout.write(f"📍 {suggestions[0].label}")
                return suggestions[0].vers_localisation()

        return Localisation()
