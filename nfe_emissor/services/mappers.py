"""
Mapeamento dos registros persistidos (empresa / cliente) para os grupos
<emit> e <dest> da NF-e.
"""
import logging
from typing import Optional

from nfe_emissor.core.exceptions import InputError
from nfe_emissor.schemas import CompanyProfile, Customer, Issuer, Recipient, Address
from nfe_emissor.utils.formatting import only_digits

logger = logging.getLogger(__name__)

DEFAULT_UF = "PB"
DEFAULT_COUNTRY_CODE = "1058"
DEFAULT_COUNTRY_NAME = "BRASIL"
NOT_INFORMED = "NAO INFORMADO"


def map_company_to_issuer(company: CompanyProfile, municipality_name: str) -> Issuer:
    """
    Converte o registro da empresa em Issuer pronto para o XML.

    Nao valida nada: o CRT e copiado como esta (validate_issuer cuida disso).
    """
    return Issuer(
        cnpj=only_digits(company.cnpj),
        legal_name=company.legal_name or '',
        trade_name=company.trade_name or None,
        state_registration=only_digits(company.state_registration),
        state_registration_st=only_digits(company.state_registration_st),
        municipal_registration=only_digits(company.municipal_registration),
        cnae=company.cnae or None,
        tax_regime=company.tax_regime,
        address=Address(
            street=company.street or '',
            number=company.number or 'S/N',
            complement=company.complement or None,
            neighborhood=company.neighborhood or 'CENTRO',
            municipality_code=company.municipality_code or '',
            municipality_name=municipality_name,
            uf=company.uf or DEFAULT_UF,
            cep=only_digits(company.cep),
            country_code=company.country_code or DEFAULT_COUNTRY_CODE,
            country_name=company.country_name or DEFAULT_COUNTRY_NAME,
            phone=only_digits(company.phone),
        ),
    )


def map_recipient_from_customer(
    customer: Customer,
    company: Optional[CompanyProfile] = None
) -> Recipient:
    """
    Converte o cliente em destinatario.

    CPF ou CNPJ e decidido so pelo tamanho do documento (> 11 digitos = CNPJ).
    Sem codigo de municipio, UF ou CEP proprios, o cliente herda os da
    empresa emitente.
    """
    document = only_digits(customer.document)
    if not document:
        raise InputError(f"Destinatario {customer.id} sem CPF/CNPJ")
    is_cnpj = len(document) > 11

    # Fallback para a localizacao do emitente
    borrowed = []
    municipality_code = customer.municipality_code
    if not municipality_code:
        municipality_code = (company.municipality_code if company else None) or "0000000"
        borrowed.append("codigomunicipio")

    uf = customer.state
    if not uf:
        uf = (company.uf if company else None) or DEFAULT_UF
        borrowed.append("uf")

    cep = only_digits(customer.cep)
    if not cep:
        cep = only_digits(company.cep if company else None) or "00000000"
        borrowed.append("cep")

    if borrowed:
        logger.warning(
            f"Destinatario {customer.id} sem {', '.join(borrowed)}; usando dados do emitente (ou padrao)"
        )

    state_registration = only_digits(customer.state_registration)

    return Recipient(
        cnpj=document if is_cnpj else None,
        cpf=document if not is_cnpj else None,
        name=customer.name,
        ie_indicator="1" if customer.state_registration else "9",
        state_registration=state_registration if customer.state_registration else None,
        address=Address(
            street=customer.street or NOT_INFORMED,
            number=customer.number or 'S/N',
            complement=customer.complement or None,
            neighborhood=customer.neighborhood or 'CENTRO',
            municipality_code=municipality_code,
            municipality_name=customer.city or NOT_INFORMED,
            uf=uf,
            cep=cep,
            country_code=DEFAULT_COUNTRY_CODE,
            country_name=DEFAULT_COUNTRY_NAME,
            phone=only_digits(customer.phone) or None,
        ),
    )
