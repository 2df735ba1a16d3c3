"""
Montagem da NF-e (preview sem assinatura)

Junta identificacao, emitente, destinatario, itens e totais dentro de
<NFe><infNFe Id="NFe..." versao="4.00">. O XML sai sem assinatura; a
assinatura e a transmissao ficam para etapas posteriores.
"""
import logging
from decimal import Decimal
from typing import List, NamedTuple, Optional

from lxml import etree

from nfe_emissor.core.config import Settings, get_settings
from nfe_emissor.schemas import (
    CompanyProfile,
    Identification,
    IssuanceOptions,
    InvoicePreview,
    InvoiceTotals,
    LineItem,
    Recipient,
    Address
)
from nfe_emissor.services.access_key import (
    AccessKey,
    generate_access_key,
    generate_random_code
)
from nfe_emissor.services.mappers import map_company_to_issuer
from nfe_emissor.services import xml_builders
from nfe_emissor.services.xml_builders import add_child, new_element
from nfe_emissor.utils.formatting import (
    format_datetime_nfe,
    now_in_timezone,
    quantize
)

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
NFE_VERSION = "4.00"

# Destinatario ficticio exigido pela SEFAZ em homologacao
HOMOLOGATION_RECIPIENT_NAME = "NF-E EMITIDA EM AMBIENTE DE HOMOLOGACAO - SEM VALOR FISCAL"
HOMOLOGATION_RECIPIENT_CPF = "12345678909"


class IdentificationResult(NamedTuple):
    ide: Identification
    access_key: AccessKey


def _resolve(options: IssuanceOptions, settings: Settings) -> dict:
    return {
        "uf_code": options.uf_code or settings.NFE_UF_CODE,
        "model": options.model or settings.NFE_MODEL,
        "timezone": options.timezone or settings.NFE_TIMEZONE,
        "operation_nature": options.operation_nature or settings.NFE_NATUREZA_OPERACAO,
        "process_version": options.process_version or settings.NFE_VER_PROC,
        "municipality_name": options.municipality_name or settings.NFE_MUNICIPALITY_NAME,
        "additional_info": options.additional_info or settings.NFE_INF_CPL,
    }


def build_identification_for_company(
    company: CompanyProfile,
    invoice_number: int,
    series: int,
    options: Optional[IssuanceOptions] = None,
    settings: Optional[Settings] = None
) -> IdentificationResult:
    """
    Monta o grupo <ide> e a chave de acesso da nota.

    Args:
        company: Empresa emitente
        invoice_number: Numero da nota (1..999999999)
        series: Serie (1..999)
        options: Sobrescreve UF, modelo, fuso, data/hora e cNF
        settings: Settings explicito (testes)

    Returns:
        IdentificationResult(ide, access_key)
    """
    options = options or IssuanceOptions()
    settings = settings or get_settings()
    resolved = _resolve(options, settings)

    environment = 1 if company.is_production else 2

    now = options.now or now_in_timezone(resolved["timezone"])
    random_code = options.random_code or generate_random_code(invoice_number)

    # generate_access_key valida faixas de serie, numero e tpEmis
    access_key = generate_access_key(
        uf_code=resolved["uf_code"],
        year=now.year,
        month=now.month,
        cnpj=company.cnpj,
        model=resolved["model"],
        series=series,
        number=invoice_number,
        emission_type=options.emission_type,
        random_code=random_code,
    )
    parts = access_key.parts()

    ide = Identification(
        uf_code=parts["uf"],
        random_code=parts["random_code"],
        operation_nature=resolved["operation_nature"],
        model=parts["model"],
        series=series,
        number=invoice_number,
        emission_datetime=format_datetime_nfe(now),
        municipality_code=company.municipality_code or '',
        emission_type=options.emission_type,
        check_digit=access_key.check_digit,
        environment=environment,
        process_version=resolved["process_version"],
    )
    return IdentificationResult(ide=ide, access_key=access_key)


def homologation_recipient(company: CompanyProfile, municipality_name: str) -> Recipient:
    return Recipient(
        cpf=HOMOLOGATION_RECIPIENT_CPF,
        name=HOMOLOGATION_RECIPIENT_NAME,
        ie_indicator="9",
        address=Address(
            street="RUA TESTE",
            number="100",
            neighborhood="BAIRRO TESTE",
            municipality_code=company.municipality_code or '',
            municipality_name=municipality_name,
            uf="PB",
            cep="58000000",
        ),
    )


def fallback_item() -> LineItem:
    return LineItem(
        item_number=1,
        product_code="001",
        description="PECA TESTE",
        ncm="61091000",
        cfop="5102",
        unit="UN",
        quantity=Decimal("1"),
        unit_price=Decimal("100.00"),
        line_total=Decimal("100.00"),
    )


def build_invoice_preview_xml(
    company: CompanyProfile,
    invoice_number: int,
    series: int,
    items: Optional[List[LineItem]] = None,
    recipient: Optional[Recipient] = None,
    options: Optional[IssuanceOptions] = None,
    settings: Optional[Settings] = None
) -> InvoicePreview:
    """
    Gera o XML completo da NF-e (sem assinatura).

    Sem destinatario usa o destinatario de homologacao; sem itens usa um
    item de teste. Os itens sao renumerados 1..N na ordem recebida.
    """
    options = options or IssuanceOptions()
    settings = settings or get_settings()
    resolved = _resolve(options, settings)

    result = build_identification_for_company(company, invoice_number, series, options, settings)
    access_key = result.access_key

    issuer = map_company_to_issuer(company, resolved["municipality_name"])
    if recipient is None:
        recipient = homologation_recipient(company, resolved["municipality_name"])

    source_items = items if items else [fallback_item()]
    numbered = [
        item.model_copy(update={"item_number": index})
        for index, item in enumerate(source_items, start=1)
    ]

    root = new_element('NFe')
    inf_nfe = add_child(root, 'infNFe')
    inf_nfe.set('Id', access_key.document_id)
    inf_nfe.set('versao', NFE_VERSION)

    inf_nfe.append(xml_builders.ide_element(result.ide))
    inf_nfe.append(xml_builders.emit_element(issuer))
    inf_nfe.append(xml_builders.dest_element(recipient))

    totals = InvoiceTotals()
    for item in numbered:
        taxes = xml_builders.compute_item_taxes(item)
        inf_nfe.append(xml_builders.det_element(item, taxes))

        totals.products += quantize(item.line_total, 2)
        if taxes.icms_group == 'ICMS00':
            totals.icms_base += taxes.icms_base
            totals.icms += taxes.icms_value
        totals.pis += taxes.pis_value
        totals.cofins += taxes.cofins_value

    # Tributos ja inclusos no preco: vNF = vProd
    totals.invoice = totals.products

    inf_nfe.append(xml_builders.total_element(totals))
    inf_nfe.append(xml_builders.transp_element())
    inf_nfe.append(xml_builders.pag_element(totals.invoice))
    inf_nfe.append(xml_builders.inf_adic_element(resolved["additional_info"]))

    etree.cleanup_namespaces(root)
    xml = XML_DECLARATION + etree.tostring(root, encoding='unicode')

    logger.info(f"NF-e montada: {access_key.document_id} ({len(numbered)} itens)")

    return InvoicePreview(
        xml=xml,
        access_key=access_key.key,
        document_id=access_key.document_id,
    )

