"""
Source de vérité des montants: prix et description par contexte de checkout.
Lecture seule, construite au démarrage; jamais alimentée par la requête client.
"""
from types import MappingProxyType
from typing import List, Mapping, Optional

from .errors import ConfigurationError
from .models import AmountSpec
from .money import MinorUnits


class AmountAuthority:
    def __init__(
        self,
        amounts: Mapping[str, int],
        descriptions: Mapping[str, str],
        currencies: Optional[Mapping[str, str]] = None,
        default_currency: str = "usd",
    ):
        self._amounts = MappingProxyType(dict(amounts))
        self._descriptions = MappingProxyType(dict(descriptions))
        self._currencies = MappingProxyType(dict(currencies or {}))
        self._default_currency = default_currency.lower()

    @classmethod
    def from_settings(cls, settings) -> "AmountAuthority":
        return cls(
            amounts=settings.amounts,
            descriptions=settings.descriptions,
            currencies=settings.currencies,
            default_currency=settings.default_currency,
        )

    def resolve(self, context: str) -> AmountSpec:
        """
        Retourne l'AmountSpec du contexte.
        Soulève ConfigurationError si aucun montant (ou description) n'est configuré.
        """
        if context not in self._amounts:
            raise ConfigurationError(f"Aucun montant configuré pour le contexte '{context}'")
        description = self._descriptions.get(context)
        if not description:
            raise ConfigurationError(f"Aucune description configurée pour le contexte '{context}'")
        try:
            amount = MinorUnits(self._amounts[context])
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Montant invalide pour le contexte '{context}': {e}")
        currency = self._currencies.get(context) or self._default_currency
        return AmountSpec(amount=amount, currency=currency, description=description)

    def contexts(self) -> List[str]:
        return sorted(self._amounts)
