"""
Contrats de données pour le module weather.
Définit les structures de données garanties par le module.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List
import math
import pandas as pd


# Valeurs retenues quand PVGIS est indisponible
PRODUCTION_SPECIFIQUE_DEFAUT = 1200.0  # kWh/kWc/an
INCLINAISON_DEFAUT = 30.0              # °
AZIMUT_DEFAUT = 180.0                  # ° (sud)
PERTES_SYSTEME_DEFAUT = 14.0           # %

# Colonnes PVGIS (outputs.monthly.fixed) → noms internes
COLONNES_MENSUELLES = {
    'month': 'mois',
    'E_m': 'production_kwh',
    'E_d': 'production_jour_kwh',
    'H(i)_m': 'irradiation_kwh_m2',
    'SD_m': 'ecart_type_kwh',
}


@dataclass(frozen=True)
class ProductionData:
    """
    Production photovoltaïque estimée pour une puissance donnée.

    Attributes:
        production_annuelle_kwh: Production annuelle (kWh)
        production_specifique: Production spécifique (kWh/kWc/an)
        inclinaison_optimale: Inclinaison optimale (°)
        azimut_optimal: Azimut optimal (°, 0=Nord, 180=Sud)
        pertes_systeme_pct: Pertes système (%)
        donnees_mensuelles: 12 dicts (mois, production_kwh, ...) ou liste vide
        source: 'api' ou 'fallback'
    """
    production_annuelle_kwh: float
    production_specifique: float
    inclinaison_optimale: float = INCLINAISON_DEFAUT
    azimut_optimal: float = AZIMUT_DEFAUT
    pertes_systeme_pct: float = PERTES_SYSTEME_DEFAUT
    donnees_mensuelles: List[Dict[str, Any]] = field(default_factory=list)
    source: str = 'api'


def arrondi_demi_haut(valeur: float) -> int:
    """Arrondi à l'entier le plus proche (demi vers le haut)."""
    return math.floor(valeur + 0.5)


def production_par_defaut(puissance_crete_kwc: float) -> ProductionData:
    """Production de secours : 1200 kWh/kWc/an, 30°, plein sud, 14% de pertes."""
    return ProductionData(
        production_annuelle_kwh=arrondi_demi_haut(puissance_crete_kwc * PRODUCTION_SPECIFIQUE_DEFAUT),
        production_specifique=PRODUCTION_SPECIFIQUE_DEFAUT,
        source='fallback',
    )


def monthly_to_dataframe(monthly: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    Convertit la série mensuelle PVGIS en DataFrame aux colonnes internes.

    Args:
        monthly: Liste outputs.monthly.fixed de la réponse PVcalc

    Returns:
        pd.DataFrame trié par mois
    """
    df = pd.DataFrame(monthly)
    existing_mappings = {k: v for k, v in COLONNES_MENSUELLES.items() if k in df.columns}
    df = df.rename(columns=existing_mappings)
    df = df[[col for col in COLONNES_MENSUELLES.values() if col in df.columns]]

    if 'mois' in df.columns:
        df = df.sort_values('mois').reset_index(drop=True)

    return df


def validate_monthly_dataframe(df: pd.DataFrame) -> bool:
    """
    Valide qu'un DataFrame mensuel respecte le contrat.

    Contrat :
        - 12 lignes exactement
        - Colonnes obligatoires : ['mois', 'production_kwh']
        - Pas de valeurs manquantes sur colonnes obligatoires
        - production_kwh >= 0

    Raises:
        ValueError: Si non-conforme au contrat
    """
    if len(df) != 12:
        raise ValueError(f"DataFrame mensuel doit avoir 12 lignes, a {len(df)}")

    required_cols = ['mois', 'production_kwh']
    missing = set(required_cols) - set(df.columns)
    if missing:
        raise ValueError(f"Colonnes manquantes : {missing}")

    if df[required_cols].isna().any().any():
        raise ValueError("Valeurs manquantes détectées dans colonnes obligatoires")

    if (df['production_kwh'] < 0).any():
        raise ValueError("production_kwh contient des valeurs négatives")

    return True
