"""
NF-e Emissor - Formatacao de campos
Funcoes auxiliares usadas pelos mapeadores e geradores de XML
"""
import re
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional, Union
from zoneinfo import ZoneInfo

from nfe_emissor.core.exceptions import InputError

_NON_DIGITS = re.compile(r'\D')

Number = Union[Decimal, int, float, str]


def only_digits(value: Optional[str]) -> str:
    """Remove tudo que nao for digito (mascaras de CNPJ, CEP, telefone...)"""
    if not value:
        return ''
    return _NON_DIGITS.sub('', str(value))


def is_blank(value: Optional[str]) -> bool:
    return value is None or str(value).strip() == ''


def to_decimal(value: Optional[Number], fallback: Optional[Number] = None) -> Optional[Decimal]:
    """Converte para Decimal, usando o fallback quando o valor nao e numerico"""
    if value is None or value == '':
        return None if fallback is None else to_decimal(fallback)
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None if fallback is None else to_decimal(fallback)
    if result.is_nan():
        return None if fallback is None else to_decimal(fallback)
    return result


def quantize(value: Number, places: int = 2) -> Decimal:
    exp = Decimal(1).scaleb(-places)
    return Decimal(str(value)).quantize(exp, rounding=ROUND_HALF_UP)


def format_decimal(value: Number, places: int = 2) -> str:
    """Formata numero no padrao da NF-e (ponto como separador decimal)"""
    return f"{quantize(value, places):.{places}f}"


def now_in_timezone(tz_name: str) -> datetime:
    return datetime.now(ZoneInfo(tz_name))


def format_datetime_nfe(moment: datetime) -> str:
    """
    Formata data/hora no padrao da NF-e 4.00: AAAA-MM-DDThh:mm:ss-03:00

    O deslocamento vem do proprio datetime, que precisa ter fuso.
    """
    if moment.tzinfo is None or moment.utcoffset() is None:
        raise InputError("Data de emissao precisa ter fuso horario (datetime aware)")
    return moment.replace(microsecond=0).isoformat()
