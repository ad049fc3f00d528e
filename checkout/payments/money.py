"""
Montants en unités mineures (centimes) et affichage.
Aucun flottant sur le chemin de paiement: seule format_minor_units produit
une représentation décimale, en lecture seule.
"""
from dataclasses import dataclass
from decimal import Decimal

# Devises sans sous-unité côté Stripe (montant envoyé tel quel)
ZERO_DECIMAL_CURRENCIES = frozenset({
    "bif", "clp", "djf", "gnf", "jpy", "kmf", "krw", "mga",
    "pyg", "rwf", "ugx", "vnd", "vuv", "xaf", "xof", "xpf",
})


@dataclass(frozen=True)
class MinorUnits:
    """Entier strictement positif de la plus petite unité monétaire (ex: 500 = 5,00 USD)."""
    value: int

    def __post_init__(self):
        # bool est un int en Python: refusé explicitement
        if type(self.value) is not int:
            raise TypeError(f"MinorUnits attend un int, reçu {type(self.value).__name__}")
        if self.value <= 0:
            raise ValueError("MinorUnits doit être strictement positif")

    def __str__(self) -> str:
        return str(self.value)


def currency_exponent(currency: str) -> int:
    return 0 if (currency or "").lower() in ZERO_DECIMAL_CURRENCIES else 2


def format_minor_units(amount: MinorUnits, currency: str) -> str:
    """
    Conversion d'affichage unités mineures -> unité principale.
    - format_minor_units(MinorUnits(500), "usd") == "5.00 USD"
    - format_minor_units(MinorUnits(500), "jpy") == "500 JPY"
    Ne jamais réinjecter le résultat dans un appel de paiement.
    """
    exponent = currency_exponent(currency)
    major = Decimal(amount.value).scaleb(-exponent)
    return f"{major:.{exponent}f} {(currency or '').upper()}"
