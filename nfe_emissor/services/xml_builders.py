"""
Geradores dos blocos XML da NF-e 4.00

Cada grupo e montado com lxml na ORDEM exigida pelo schema da SEFAZ;
elementos irmaos fora de ordem sao rejeitados pelo validador, entao a
sequencia de SubElement abaixo e parte do contrato.
"""
import re
from decimal import Decimal
from typing import Optional

from lxml import etree

from nfe_emissor.schemas import (
    Identification,
    Issuer,
    Recipient,
    LineItem,
    ItemTaxes,
    InvoiceTotals,
    TaxRegime
)
from nfe_emissor.utils.formatting import format_decimal, quantize, to_decimal, is_blank

# Namespace da NF-e 4.0
NFE_NAMESPACE = 'http://www.portalfiscal.inf.br/nfe'
NSMAP = {None: NFE_NAMESPACE}

NO_GTIN = 'SEM GTIN'

# Aliquotas usadas quando o item de Lucro Presumido nao informa a propria
DEFAULT_PIS_RATE_PRESUMIDO = Decimal('0.65')
DEFAULT_COFINS_RATE_PRESUMIDO = Decimal('3.00')

_TAXED_PIS_COFINS_CST = ('01', '02')

# Caracteres de controle proibidos pelo XML 1.0 (tab, LF e CR sao aceitos)
_XML_INVALID_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f]')


def _tag(name: str) -> str:
    return '{%s}%s' % (NFE_NAMESPACE, name)


def new_element(name: str) -> etree._Element:
    return etree.Element(_tag(name), nsmap=NSMAP)


def add_child(parent: etree._Element, name: str, text=None, max_length: Optional[int] = None) -> etree._Element:
    element = etree.SubElement(parent, _tag(name))
    if text is not None:
        value = _XML_INVALID_CHARS.sub('', str(text))
        element.text = value[:max_length] if max_length else value
    return element


def to_xml(element: etree._Element) -> str:
    """Serializa um fragmento sem declaracao XML"""
    return etree.tostring(element, encoding='unicode')


# =====================================================
# IDE - Identificacao
# =====================================================

def ide_element(ide: Identification) -> etree._Element:
    el = new_element('ide')
    add_child(el, 'cUF', ide.uf_code)
    add_child(el, 'cNF', ide.random_code)
    add_child(el, 'natOp', ide.operation_nature, 60)
    add_child(el, 'mod', ide.model)
    add_child(el, 'serie', ide.series)
    add_child(el, 'nNF', ide.number)
    add_child(el, 'dhEmi', ide.emission_datetime)
    add_child(el, 'tpNF', ide.operation_type)
    add_child(el, 'idDest', ide.destination)
    add_child(el, 'cMunFG', ide.municipality_code)
    add_child(el, 'tpImp', ide.print_type)
    add_child(el, 'tpEmis', ide.emission_type)
    add_child(el, 'cDV', ide.check_digit)  # DV ANTES do tpAmb
    add_child(el, 'tpAmb', ide.environment)
    add_child(el, 'finNFe', ide.purpose)
    add_child(el, 'indFinal', ide.final_consumer)
    add_child(el, 'indPres', ide.presence)
    add_child(el, 'procEmi', ide.emission_process)
    add_child(el, 'verProc', ide.process_version, 20)
    return el


def build_ide_xml(ide: Identification) -> str:
    return to_xml(ide_element(ide))


# =====================================================
# EMIT - Emitente
# =====================================================

def emit_element(emit: Issuer) -> etree._Element:
    el = new_element('emit')
    add_child(el, 'CNPJ', emit.cnpj)
    add_child(el, 'xNome', emit.legal_name, 60)
    if emit.trade_name:
        add_child(el, 'xFant', emit.trade_name, 60)

    address = emit.address
    ender = add_child(el, 'enderEmit')
    add_child(ender, 'xLgr', address.street, 60)
    add_child(ender, 'nro', address.number, 60)
    if address.complement:
        add_child(ender, 'xCpl', address.complement, 60)
    add_child(ender, 'xBairro', address.neighborhood, 60)
    add_child(ender, 'cMun', address.municipality_code)
    add_child(ender, 'xMun', address.municipality_name, 60)
    add_child(ender, 'UF', address.uf)
    if address.cep:
        add_child(ender, 'CEP', address.cep)
    add_child(ender, 'cPais', address.country_code)
    add_child(ender, 'xPais', address.country_name, 60)
    if address.phone:
        add_child(ender, 'fone', address.phone)

    add_child(el, 'IE', emit.state_registration or 'ISENTO')
    if emit.state_registration_st:
        add_child(el, 'IEST', emit.state_registration_st)
    # CNAE so existe dentro do grupo opcional de IM
    if emit.municipal_registration:
        add_child(el, 'IM', emit.municipal_registration)
        if emit.cnae:
            add_child(el, 'CNAE', emit.cnae)
    add_child(el, 'CRT', emit.tax_regime)
    return el


def build_emit_xml(emit: Issuer) -> str:
    return to_xml(emit_element(emit))


# =====================================================
# DEST - Destinatario
# =====================================================

def dest_element(dest: Recipient) -> etree._Element:
    el = new_element('dest')
    if dest.cnpj:
        add_child(el, 'CNPJ', dest.cnpj)
    else:
        add_child(el, 'CPF', dest.cpf or '')
    add_child(el, 'xNome', dest.name, 60)

    address = dest.address
    ender = add_child(el, 'enderDest')
    add_child(ender, 'xLgr', address.street, 60)
    add_child(ender, 'nro', address.number, 60)
    if address.complement:
        add_child(ender, 'xCpl', address.complement, 60)
    add_child(ender, 'xBairro', address.neighborhood, 60)
    add_child(ender, 'cMun', address.municipality_code)
    add_child(ender, 'xMun', address.municipality_name, 60)
    add_child(ender, 'UF', address.uf)
    add_child(ender, 'CEP', address.cep)
    add_child(ender, 'cPais', address.country_code)
    add_child(ender, 'xPais', address.country_name, 60)
    if address.phone:
        add_child(ender, 'fone', address.phone)

    add_child(el, 'indIEDest', dest.ie_indicator)
    if dest.state_registration:
        add_child(el, 'IE', dest.state_registration)
    return el


def build_dest_xml(dest: Recipient) -> str:
    return to_xml(dest_element(dest))


# =====================================================
# DET - Itens
# =====================================================

def _percent_of(base: Decimal, rate: Decimal) -> Decimal:
    return quantize(base * rate / Decimal(100), 2)


def compute_item_taxes(item: LineItem) -> ItemTaxes:
    """
    Define o grupo de ICMS/PIS/COFINS do item e calcula bases e valores.

    O mesmo resultado e usado no <det> e no <ICMSTot>, entao o que vai
    escrito no item sempre bate com os totais.
    """
    line_total = quantize(item.line_total, 2)
    origin = item.origin or '0'

    if item.tax_regime == TaxRegime.SIMPLES_NACIONAL and not is_blank(item.csosn):
        taxes = ItemTaxes(icms_group='ICMSSN102', origin=origin, csosn=str(item.csosn).strip())
    elif not is_blank(item.cst_icms):
        # Regime normal: tudo sai como ICMS00
        base = quantize(to_decimal(item.icms_base, line_total), 2)
        rate = to_decimal(item.icms_rate, 0)
        value = item.icms_value if item.icms_value is not None else _percent_of(base, rate)
        taxes = ItemTaxes(
            icms_group='ICMS00',
            origin=origin,
            cst_icms=str(item.cst_icms).strip().zfill(2),
            icms_bc_mode=item.icms_bc_mode or '3',
            icms_base=base,
            icms_rate=rate,
            icms_value=quantize(value, 2),
        )
    else:
        taxes = ItemTaxes(icms_group='ICMSSN102', origin='0', csosn='102')

    presumido = item.tax_regime == TaxRegime.LUCRO_PRESUMIDO

    cst_pis = str(item.cst_pis).strip().zfill(2) if not is_blank(item.cst_pis) else '07'
    taxes.cst_pis = cst_pis
    if cst_pis in _TAXED_PIS_COFINS_CST:
        base = quantize(to_decimal(item.pis_base, line_total), 2)
        if item.pis_rate is not None:
            rate = item.pis_rate
        else:
            rate = DEFAULT_PIS_RATE_PRESUMIDO if presumido else Decimal(0)
        value = item.pis_value if item.pis_value is not None else _percent_of(base, rate)
        taxes.pis_taxed = True
        taxes.pis_base = base
        taxes.pis_rate = rate
        taxes.pis_value = quantize(value, 2)

    cst_cofins = str(item.cst_cofins).strip().zfill(2) if not is_blank(item.cst_cofins) else '07'
    taxes.cst_cofins = cst_cofins
    if cst_cofins in _TAXED_PIS_COFINS_CST:
        base = quantize(to_decimal(item.cofins_base, line_total), 2)
        if item.cofins_rate is not None:
            rate = item.cofins_rate
        else:
            rate = DEFAULT_COFINS_RATE_PRESUMIDO if presumido else Decimal(0)
        value = item.cofins_value if item.cofins_value is not None else _percent_of(base, rate)
        taxes.cofins_taxed = True
        taxes.cofins_base = base
        taxes.cofins_rate = rate
        taxes.cofins_value = quantize(value, 2)

    return taxes


def _icms_element(parent: etree._Element, taxes: ItemTaxes):
    icms = add_child(parent, 'ICMS')
    if taxes.icms_group == 'ICMS00':
        group = add_child(icms, 'ICMS00')
        add_child(group, 'orig', taxes.origin)
        add_child(group, 'CST', taxes.cst_icms)
        add_child(group, 'modBC', taxes.icms_bc_mode)
        add_child(group, 'vBC', format_decimal(taxes.icms_base))
        add_child(group, 'pICMS', format_decimal(taxes.icms_rate))
        add_child(group, 'vICMS', format_decimal(taxes.icms_value))
    else:
        group = add_child(icms, 'ICMSSN102')
        add_child(group, 'orig', taxes.origin)
        add_child(group, 'CSOSN', taxes.csosn)


def _pis_element(parent: etree._Element, taxes: ItemTaxes):
    pis = add_child(parent, 'PIS')
    if taxes.pis_taxed:
        group = add_child(pis, 'PISAliq')
        add_child(group, 'CST', taxes.cst_pis)
        add_child(group, 'vBC', format_decimal(taxes.pis_base))
        add_child(group, 'pPIS', format_decimal(taxes.pis_rate))
        add_child(group, 'vPIS', format_decimal(taxes.pis_value))
    else:
        group = add_child(pis, 'PISNT')
        add_child(group, 'CST', taxes.cst_pis)


def _cofins_element(parent: etree._Element, taxes: ItemTaxes):
    cofins = add_child(parent, 'COFINS')
    if taxes.cofins_taxed:
        group = add_child(cofins, 'COFINSAliq')
        add_child(group, 'CST', taxes.cst_cofins)
        add_child(group, 'vBC', format_decimal(taxes.cofins_base))
        add_child(group, 'pCOFINS', format_decimal(taxes.cofins_rate))
        add_child(group, 'vCOFINS', format_decimal(taxes.cofins_value))
    else:
        group = add_child(cofins, 'COFINSNT')
        add_child(group, 'CST', taxes.cst_cofins)


def det_element(item: LineItem, taxes: Optional[ItemTaxes] = None) -> etree._Element:
    """
    Gera o bloco <det> com <prod> e <imposto> (ICMS + PIS + COFINS).

    Sem codigo de barras a SEFAZ exige literalmente "SEM GTIN".
    """
    if taxes is None:
        taxes = compute_item_taxes(item)

    q_com = format_decimal(item.quantity, 4)
    v_un_com = format_decimal(item.unit_price, 10)
    v_prod = format_decimal(item.line_total, 2)
    c_ean = item.barcode.strip() if item.barcode and item.barcode.strip() else NO_GTIN

    el = new_element('det')
    el.set('nItem', str(item.item_number))

    prod = add_child(el, 'prod')
    add_child(prod, 'cProd', item.product_code, 60)
    add_child(prod, 'cEAN', c_ean)
    add_child(prod, 'xProd', item.description, 120)
    add_child(prod, 'NCM', item.ncm)
    add_child(prod, 'CFOP', item.cfop)
    add_child(prod, 'uCom', item.unit, 6)
    add_child(prod, 'qCom', q_com)
    add_child(prod, 'vUnCom', v_un_com)
    add_child(prod, 'vProd', v_prod)
    add_child(prod, 'cEANTrib', c_ean)
    add_child(prod, 'uTrib', item.unit, 6)
    add_child(prod, 'qTrib', q_com)
    add_child(prod, 'vUnTrib', v_un_com)
    add_child(prod, 'indTot', '1')  # Compoe total

    imposto = add_child(el, 'imposto')
    _icms_element(imposto, taxes)
    _pis_element(imposto, taxes)
    _cofins_element(imposto, taxes)
    return el


def build_det_xml(item: LineItem, taxes: Optional[ItemTaxes] = None) -> str:
    return to_xml(det_element(item, taxes))


# =====================================================
# TOTAL / TRANSP / PAG / INFADIC
# =====================================================

def total_element(totals: InvoiceTotals) -> etree._Element:
    el = new_element('total')
    icms_tot = add_child(el, 'ICMSTot')
    zero = '0.00'
    add_child(icms_tot, 'vBC', format_decimal(totals.icms_base))
    add_child(icms_tot, 'vICMS', format_decimal(totals.icms))
    add_child(icms_tot, 'vICMSDeson', zero)
    add_child(icms_tot, 'vFCP', zero)
    add_child(icms_tot, 'vBCST', zero)
    add_child(icms_tot, 'vST', zero)
    add_child(icms_tot, 'vFCPST', zero)
    add_child(icms_tot, 'vFCPSTRet', zero)
    add_child(icms_tot, 'vProd', format_decimal(totals.products))
    add_child(icms_tot, 'vFrete', zero)
    add_child(icms_tot, 'vSeg', zero)
    add_child(icms_tot, 'vDesc', zero)
    add_child(icms_tot, 'vII', zero)
    add_child(icms_tot, 'vIPI', zero)
    add_child(icms_tot, 'vIPIDevol', zero)
    add_child(icms_tot, 'vPIS', format_decimal(totals.pis))
    add_child(icms_tot, 'vCOFINS', format_decimal(totals.cofins))
    add_child(icms_tot, 'vOutro', zero)
    add_child(icms_tot, 'vNF', format_decimal(totals.invoice))
    return el


def transp_element() -> etree._Element:
    el = new_element('transp')
    add_child(el, 'modFrete', '9')  # 9 = sem frete
    return el


def pag_element(amount: Decimal) -> etree._Element:
    el = new_element('pag')
    det_pag = add_child(el, 'detPag')
    add_child(det_pag, 'tPag', '01')  # 01 = dinheiro
    add_child(det_pag, 'vPag', format_decimal(amount))
    return el


def inf_adic_element(text: str) -> etree._Element:
    el = new_element('infAdic')
    add_child(el, 'infCpl', text, 5000)
    return el
