from .formatting import (
    only_digits,
    is_blank,
    to_decimal,
    quantize,
    format_decimal,
    now_in_timezone,
    format_datetime_nfe
)

__all__ = [
    "only_digits",
    "is_blank",
    "to_decimal",
    "quantize",
    "format_decimal",
    "now_in_timezone",
    "format_datetime_nfe"
]
