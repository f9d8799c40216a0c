"""Trading pair normalization."""

QUOTE_IDR = "idr"


def normalize_symbol(raw: str) -> str:
    """Canonicalize an Indodax pair identifier.

    Upstream expects ``<base>_<quote>`` in lowercase. A pair that mentions
    ``idr`` without an underscore has its first ``idr`` removed to get the base
    and is reassembled as ``<base>_idr``; anything else is only lower-cased.

    Examples:
        >>> normalize_symbol("BTCIDR")
        'btc_idr'
        >>> normalize_symbol("btc_idr")
        'btc_idr'
        >>> normalize_symbol("ETHUSDT")
        'ethusdt'
    """
    symbol = raw.lower()
    if QUOTE_IDR in symbol and "_" not in symbol:
        base = symbol.replace(QUOTE_IDR, "", 1)
        return f"{base}_{QUOTE_IDR}"
    return symbol
