import logging
from typing import Iterable, List, Optional, Tuple, Union
from backoffice.core.enums import Currency
from backoffice.core.exceptions import UnsupportedCurrencyError
from backoffice.models.store import Store

logger = logging.getLogger(__name__)


def parse_currency(value: Union[Currency, str]) -> Currency:
    """Converts "EUR"/"GBP" into Currency, rejecting anything else"""
    if isinstance(value, Currency):
        return value
    try:
        return Currency(str(value).strip().upper())
    except ValueError:
        raise UnsupportedCurrencyError(value)


def normalize_store_currencies(
    supported: Optional[Iterable[str]], default: Optional[str]
) -> Tuple[List[Currency], Currency]:
    """
    Builds the currency set of a new store.

    Unknown codes are dropped, an empty set falls back to EUR, the default
    currency is GBP only when asked for explicitly, and the default is always
    part of the supported set.
    """
    currencies: List[Currency] = []
    for code in supported or []:
        try:
            currency = parse_currency(code)
        except UnsupportedCurrencyError:
            logger.warning(f"Ignoring unknown currency {code!r}")
            continue
        if currency not in currencies:
            currencies.append(currency)

    if not currencies:
        currencies = [Currency.EUR]

    default_currency = Currency.GBP if default in ("GBP", Currency.GBP) else Currency.EUR
    if default_currency not in currencies:
        currencies.append(default_currency)

    return currencies, default_currency


def validate_currency(store: Store, currency: Union[Currency, str]) -> Currency:
    """
    Checks that the store accepts the currency.

    Returns:
        Currency: The parsed currency

    Raises:
        UnsupportedCurrencyError: If the currency is unknown or not supported by the store
    """
    currency = parse_currency(currency)
    if currency not in store.currencies:
        logger.warning(f"Store {store.id} does not support {currency.value}")
        raise UnsupportedCurrencyError(currency.value, store.name)
    return currency


def validate_any_store_currency(
    stores: Iterable[Store], currency: Union[Currency, str]
) -> Currency:
    """
    Checks the currency against the union of the stores' currencies.

    An empty store list accepts every known currency.
    """
    currency = parse_currency(currency)
    stores = list(stores)
    if not stores:
        return currency

    if not any(currency in store.currencies for store in stores):
        logger.warning(
            f"Currency {currency.value} is not supported by stores "
            f"{[store.id for store in stores]}"
        )
        raise UnsupportedCurrencyError(currency.value)
    return currency
