"""Currency endpoints."""

from typing import List

from fastapi import APIRouter, Query, Request

from company_directory.currency import (
    convert_currency,
    convert_to_usd,
    format_compact,
    get_currency_info,
    get_currency_name,
    get_currency_symbol,
)
from company_directory.web.api.v1.models import (
    ConversionResponse,
    CurrencyResponse,
    LocaleCurrencyResponse,
)

router = APIRouter(prefix="/currencies")


@router.get("", response_model=List[CurrencyResponse])
def list_currencies(request: Request):
    """List supported currencies with their USD rates."""
    rates = request.app.state.settings.rates()
    return [
        CurrencyResponse(
            code=code,
            name=get_currency_name(code),
            symbol=get_currency_symbol(code),
            rate=rate,
        )
        for code, rate in rates.items()
    ]


@router.get("/convert", response_model=ConversionResponse)
def convert(
    request: Request,
    amount: float = Query(...),
    from_currency: str = Query(default="USD", alias="fromCurrency", min_length=3, max_length=3),
    to_currency: str = Query(default="USD", alias="toCurrency", min_length=3, max_length=3),
):
    """
    Convert an amount between two currencies via USD.

    Unknown currencies convert 1:1.
    """
    rates = request.app.state.settings.rates()
    from_currency = from_currency.upper()
    to_currency = to_currency.upper()

    amount_usd = convert_to_usd(amount, from_currency, rates)
    result = convert_currency(amount_usd, to_currency, rates)

    return ConversionResponse(
        amount=amount,
        from_currency=from_currency,
        to_currency=to_currency,
        amount_usd=amount_usd,
        result=result,
        formatted=format_compact(result, to_currency),
    )


@router.get("/detect", response_model=LocaleCurrencyResponse)
def detect(locale: str = Query(default="en-US")):
    """Detect the currency for a locale (e.g. from Accept-Language)."""
    info = get_currency_info(locale)
    return LocaleCurrencyResponse(
        locale=locale,
        currency=info.currency,
        currency_name=info.currency_name,
        symbol=get_currency_symbol(info.currency),
    )
