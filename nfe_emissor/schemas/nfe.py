"""
NF-e Emissor - NF-e Schemas
Estruturas prontas para a geracao do XML (layout 4.00)
"""
from pydantic import BaseModel, Field
from typing import Optional
from decimal import Decimal
from datetime import datetime
import enum


class TaxRegime(str, enum.Enum):
    """Regime tributario do item"""
    SIMPLES_NACIONAL = "SIMPLES_NACIONAL"
    LUCRO_PRESUMIDO = "LUCRO_PRESUMIDO"
    LUCRO_REAL = "LUCRO_REAL"


class Address(BaseModel):
    street: str
    number: str
    complement: Optional[str] = None
    neighborhood: str
    municipality_code: str
    municipality_name: str
    uf: str
    cep: str
    country_code: str = "1058"
    country_name: str = "BRASIL"
    phone: Optional[str] = None


class Issuer(BaseModel):
    """Grupo <emit>"""
    cnpj: str
    legal_name: str
    trade_name: Optional[str] = None
    state_registration: Optional[str] = None
    state_registration_st: Optional[str] = None
    municipal_registration: Optional[str] = None
    cnae: Optional[str] = None
    tax_regime: Optional[str] = None  # CRT: 1, 2 ou 3
    address: Address


class Recipient(BaseModel):
    """Grupo <dest>"""
    cpf: Optional[str] = None
    cnpj: Optional[str] = None
    name: str
    ie_indicator: str = "9"  # indIEDest: 1=contribuinte, 2=isento, 9=nao contribuinte
    state_registration: Optional[str] = None
    address: Address


class Identification(BaseModel):
    """Grupo <ide>"""
    uf_code: str
    random_code: str
    operation_nature: str
    model: str = "55"
    series: int
    number: int
    emission_datetime: str
    operation_type: int = 1  # 1=saida
    destination: int = 1  # 1=operacao interna
    municipality_code: str
    print_type: int = 1  # DANFE retrato
    emission_type: int = 1  # emissao normal
    check_digit: str
    environment: int = 2  # 1=producao, 2=homologacao
    purpose: int = 1  # NF-e normal
    final_consumer: int = 1
    presence: int = 1  # presencial
    emission_process: int = 0  # aplicativo do contribuinte
    process_version: str


class LineItem(BaseModel):
    """
    Item da NF-e (<det>).

    Os campos de tributacao sao opcionais; sem eles o item sai no regime
    fixo (CSOSN 102, PIS/COFINS 07).
    """
    item_number: int = 1
    product_code: str
    description: str
    ncm: str
    cfop: str
    unit: str = "UN"
    quantity: Decimal
    unit_price: Decimal
    line_total: Decimal
    barcode: Optional[str] = None

    # ICMS
    tax_regime: Optional[TaxRegime] = None
    origin: Optional[str] = None
    csosn: Optional[str] = None
    cst_icms: Optional[str] = None
    icms_bc_mode: Optional[str] = None
    icms_rate: Optional[Decimal] = None
    icms_base: Optional[Decimal] = None
    icms_value: Optional[Decimal] = None

    # PIS
    cst_pis: Optional[str] = None
    pis_rate: Optional[Decimal] = None
    pis_base: Optional[Decimal] = None
    pis_value: Optional[Decimal] = None

    # COFINS
    cst_cofins: Optional[str] = None
    cofins_rate: Optional[Decimal] = None
    cofins_base: Optional[Decimal] = None
    cofins_value: Optional[Decimal] = None

    class Config:
        coerce_numbers_to_str = True


class ItemTaxes(BaseModel):
    """Tributos calculados de um item; alimenta o <det> e o <ICMSTot>"""
    icms_group: str  # ICMSSN102 ou ICMS00
    origin: str = "0"
    csosn: Optional[str] = None
    cst_icms: Optional[str] = None
    icms_bc_mode: Optional[str] = None
    icms_base: Decimal = Decimal("0")
    icms_rate: Decimal = Decimal("0")
    icms_value: Decimal = Decimal("0")

    cst_pis: str = "07"
    pis_taxed: bool = False
    pis_base: Decimal = Decimal("0")
    pis_rate: Decimal = Decimal("0")
    pis_value: Decimal = Decimal("0")

    cst_cofins: str = "07"
    cofins_taxed: bool = False
    cofins_base: Decimal = Decimal("0")
    cofins_rate: Decimal = Decimal("0")
    cofins_value: Decimal = Decimal("0")


class ValidationIssue(BaseModel):
    field: str
    message: str


class CertificatePem(BaseModel):
    """Material de assinatura; nunca persistir"""
    private_key_pem: str = Field(..., repr=False)
    certificate_pem: str


class IssuanceOptions(BaseModel):
    """
    Parametros de emissao por chamada (UF, modelo, fuso, textos fixos).

    Campos nao informados caem nos valores de Settings. `now` e
    `random_code` permitem reproduzir uma emissao em testes.
    """
    uf_code: Optional[str] = None
    model: Optional[str] = None
    timezone: Optional[str] = None
    operation_nature: Optional[str] = None
    process_version: Optional[str] = None
    municipality_name: Optional[str] = None
    additional_info: Optional[str] = None
    emission_type: int = 1
    now: Optional[datetime] = None
    random_code: Optional[str] = None


class InvoicePreview(BaseModel):
    xml: str
    access_key: str
    document_id: str


class InvoiceTotals(BaseModel):
    products: Decimal = Decimal("0.00")
    icms_base: Decimal = Decimal("0.00")
    icms: Decimal = Decimal("0.00")
    pis: Decimal = Decimal("0.00")
    cofins: Decimal = Decimal("0.00")
    invoice: Decimal = Decimal("0.00")

