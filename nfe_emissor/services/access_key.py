"""
Chave de Acesso da NF-e

Formato (44 digitos):
    cUF(2) + AAMM(4) + CNPJ(14) + mod(2) + serie(3) + nNF(9) + tpEmis(1) + cNF(8) + cDV(1)

O digito verificador e calculado por modulo 11 com pesos 2..9 aplicados da
direita para a esquerda, reiniciando a cada 8 digitos.
"""
import logging
import random
from dataclasses import dataclass
from typing import Dict, Union

from nfe_emissor.core.exceptions import InputError
from nfe_emissor.utils.formatting import only_digits

logger = logging.getLogger(__name__)

ACCESS_KEY_LENGTH = 44
DOCUMENT_ID_PREFIX = "NFe"

_WEIGHTS = (2, 3, 4, 5, 6, 7, 8, 9)

MAX_SERIES = 999
MAX_NUMBER = 999_999_999


def generate_random_code(invoice_number: int) -> str:
    """
    Gera o codigo numerico (cNF) de 8 digitos.

    O numero da nota e recebido mas nao participa do calculo.
    """
    return str(random.randint(0, 99_999_999)).zfill(8)


def calculate_check_digit(composite: str) -> str:
    """Calcula o digito verificador (modulo 11) dos 43 primeiros digitos"""
    if not composite or not composite.isdigit():
        raise InputError(f"Chave sem DV deve conter apenas digitos: {composite!r}")

    total = 0
    for position, digit in enumerate(reversed(composite)):
        total += int(digit) * _WEIGHTS[position % len(_WEIGHTS)]

    dv = 11 - (total % 11)
    # Resultado 0, 10 ou 11 vira DV 0
    if dv in (0, 10, 11):
        return '0'
    return str(dv)


@dataclass(frozen=True)
class AccessKey:
    """Chave de acesso sempre com 44 digitos e DV conferido"""
    key: str

    def __post_init__(self):
        digits = only_digits(self.key)
        if len(digits) != ACCESS_KEY_LENGTH:
            raise InputError(
                f"Chave de acesso deve ter {ACCESS_KEY_LENGTH} digitos, recebido {len(digits)}"
            )
        if calculate_check_digit(digits[:43]) != digits[43]:
            raise InputError(f"Digito verificador invalido na chave de acesso {digits}")
        object.__setattr__(self, 'key', digits)

    @property
    def document_id(self) -> str:
        return f"{DOCUMENT_ID_PREFIX}{self.key}"

    @property
    def check_digit(self) -> str:
        return self.key[43]

    def parts(self) -> Dict[str, str]:
        return {
            "uf": self.key[0:2],
            "year_month": self.key[2:6],
            "cnpj": self.key[6:20],
            "model": self.key[20:22],
            "series": self.key[22:25],
            "number": self.key[25:34],
            "emission_type": self.key[34:35],
            "random_code": self.key[35:43],
            "check_digit": self.key[43:44],
        }

    def formatted(self) -> str:
        """Chave em grupos de 4 digitos, como impressa no DANFE"""
        return " ".join(self.key[i:i + 4] for i in range(0, ACCESS_KEY_LENGTH, 4))

    def __str__(self) -> str:
        return self.key


def is_valid_access_key(value: str) -> bool:
    try:
        AccessKey(value)
    except InputError:
        return False
    return True


def _fixed_digits(value: Union[str, int], width: int, label: str) -> str:
    digits = only_digits(str(value))
    if not digits or len(digits) > width:
        raise InputError(f"{label} deve ter ate {width} digitos: {value!r}")
    return digits.zfill(width)


def _bounded(value: int, low: int, high: int, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InputError(f"{label} deve ser inteiro: {value!r}")
    if value < low or value > high:
        raise InputError(f"{label} fora da faixa {low}..{high}: {value}")
    return value


def generate_access_key(
    uf_code: str,
    year: int,
    month: int,
    cnpj: str,
    model: str,
    series: int,
    number: int,
    emission_type: int,
    random_code: str
) -> AccessKey:
    """
    Gera a chave de acesso da NF-e.

    Args:
        uf_code: Codigo IBGE da UF (2 digitos)
        year: Ano com 4 digitos (apenas os 2 ultimos entram na chave)
        month: Mes 1..12
        cnpj: CNPJ do emitente, com ou sem mascara
        model: Modelo do documento (55=NF-e, 65=NFC-e)
        series: Serie da nota (1..999)
        number: Numero da nota (1..999999999)
        emission_type: Tipo de emissao (1=Normal)
        random_code: Codigo numerico cNF (ate 8 digitos)

    Returns:
        AccessKey com chave, Id ("NFe" + chave) e DV
    """
    _bounded(month, 1, 12, "Mes")
    _bounded(year, 0, 9999, "Ano")
    _bounded(series, 1, MAX_SERIES, "Serie")
    _bounded(number, 1, MAX_NUMBER, "Numero da nota")
    _bounded(emission_type, 1, 9, "Tipo de emissao")

    composite = (
        _fixed_digits(uf_code, 2, "cUF")
        + str(year).zfill(4)[-2:]
        + str(month).zfill(2)
        + _fixed_digits(cnpj, 14, "CNPJ")
        + _fixed_digits(model, 2, "Modelo")
        + str(series).zfill(3)
        + str(number).zfill(9)
        + str(emission_type)
        + _fixed_digits(random_code, 8, "cNF")
    )

    access_key = AccessKey(composite + calculate_check_digit(composite))
    logger.debug(f"Chave de acesso gerada: {access_key.document_id}")
    return access_key
