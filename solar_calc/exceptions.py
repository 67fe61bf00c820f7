"""
Exceptions du moteur de simulation solaire.
"""


class SimulationError(Exception):
    """Erreur de base du moteur de simulation."""


class MissingLocationError(SimulationError, ValueError):
    """
    Coordonnées GPS absentes au lancement d'une estimation.

    Seule erreur qui traverse le moteur : l'appelant doit redemander
    la sélection d'une adresse.
    """

    def __init__(self, message: str = "Coordonnées GPS manquantes pour le calcul"):
        super().__init__(message)
