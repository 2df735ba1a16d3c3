"""Testes dos blocos XML (ordem dos elementos, escapes e tributacao dos itens)."""
from decimal import Decimal

from lxml import etree

from nfe_emissor.schemas import Address, Identification, Issuer, LineItem, Recipient
from nfe_emissor.services.xml_builders import (
    NFE_NAMESPACE,
    build_dest_xml,
    build_det_xml,
    build_emit_xml,
    build_ide_xml,
    compute_item_taxes
)

NS = {"nfe": NFE_NAMESPACE}


def _children(xml, path="."):
    root = etree.fromstring(xml)
    node = root if path == "." else root.find(path, NS)
    return [etree.QName(child).localname for child in node]


def _text(xml, path):
    return etree.fromstring(xml).findtext(path, namespaces=NS)


def _address(**overrides):
    data = dict(
        street="RUA A",
        number="10",
        neighborhood="CENTRO",
        municipality_code="2507507",
        municipality_name="JOAO PESSOA",
        uf="PB",
        cep="58000000",
    )
    data.update(overrides)
    return Address(**data)


def _item(**overrides):
    data = dict(
        product_code="001",
        description="PECA TESTE",
        ncm="61091000",
        cfop="5102",
        quantity=Decimal("1"),
        unit_price=Decimal("100.00"),
        line_total=Decimal("100.00"),
    )
    data.update(overrides)
    return LineItem(**data)


def test_ide_order_with_check_digit_before_environment():
    ide = Identification(
        uf_code="25",
        random_code="12345678",
        operation_nature="VENDA DE MERCADORIA",
        series=1,
        number=42,
        emission_datetime="2025-03-10T14:30:15-03:00",
        municipality_code="2507507",
        check_digit="3",
        process_version="ERPOficina 1.0.0",
    )
    xml = build_ide_xml(ide)

    assert not xml.startswith("<?xml")
    assert _children(xml) == [
        "cUF", "cNF", "natOp", "mod", "serie", "nNF", "dhEmi", "tpNF", "idDest",
        "cMunFG", "tpImp", "tpEmis", "cDV", "tpAmb", "finNFe", "indFinal",
        "indPres", "procEmi", "verProc",
    ]
    assert _text(xml, "nfe:serie") == "1"
    assert _text(xml, "nfe:nNF") == "42"
    assert _text(xml, "nfe:tpAmb") == "2"


def test_emit_minimal_order():
    issuer = Issuer(cnpj="12345678000195", legal_name="OFICINA", tax_regime="1", address=_address())
    xml = build_emit_xml(issuer)

    assert _children(xml) == ["CNPJ", "xNome", "enderEmit", "IE", "CRT"]
    assert _children(xml, "nfe:enderEmit") == [
        "xLgr", "nro", "xBairro", "cMun", "xMun", "UF", "CEP", "cPais", "xPais",
    ]
    assert _text(xml, "nfe:IE") == "ISENTO"


def test_emit_full_order():
    issuer = Issuer(
        cnpj="12345678000195",
        legal_name="OFICINA",
        trade_name="OFICINA FANTASIA",
        state_registration="161234567",
        state_registration_st="999",
        municipal_registration="12345",
        cnae="4520001",
        tax_regime="3",
        address=_address(complement="SALA 2", phone="8332221000"),
    )
    xml = build_emit_xml(issuer)

    assert _children(xml) == ["CNPJ", "xNome", "xFant", "enderEmit", "IE", "IEST", "IM", "CNAE", "CRT"]
    assert _children(xml, "nfe:enderEmit") == [
        "xLgr", "nro", "xCpl", "xBairro", "cMun", "xMun", "UF", "CEP", "cPais", "xPais", "fone",
    ]


def test_emit_cnae_requires_municipal_registration():
    issuer = Issuer(cnpj="12345678000195", legal_name="OFICINA", cnae="4520001", tax_regime="1", address=_address())
    assert "CNAE" not in _children(build_emit_xml(issuer))


def test_emit_escapes_free_text():
    issuer = Issuer(
        cnpj="12345678000195",
        legal_name='SILVA & FILHOS <LTDA> "ME"',
        tax_regime="1",
        address=_address(street="RUA D'AGUA"),
    )
    xml = build_emit_xml(issuer)

    assert "SILVA &amp; FILHOS &lt;LTDA&gt;" in xml
    assert _text(xml, "nfe:xNome") == 'SILVA & FILHOS <LTDA> "ME"'
    assert _text(xml, "nfe:enderEmit/nfe:xLgr") == "RUA D'AGUA"


def test_dest_cpf_order():
    recipient = Recipient(cpf="52998224725", name="MARIA", address=_address(phone="83999990000"))
    xml = build_dest_xml(recipient)

    assert _children(xml) == ["CPF", "xNome", "enderDest", "indIEDest"]
    assert _children(xml, "nfe:enderDest")[-1] == "fone"


def test_dest_cnpj_with_ie():
    recipient = Recipient(
        cnpj="11222333000181",
        name="CLIENTE LTDA",
        ie_indicator="1",
        state_registration="160001112",
        address=_address(),
    )
    xml = build_dest_xml(recipient)

    assert _children(xml) == ["CNPJ", "xNome", "enderDest", "indIEDest", "IE"]
    assert _text(xml, "nfe:indIEDest") == "1"


def test_det_default_regime():
    """Item sem tributacao: CSOSN 102 e PIS/COFINS 07"""
    xml = build_det_xml(_item(item_number=3))
    root = etree.fromstring(xml)

    assert root.get("nItem") == "3"
    assert _children(xml, "nfe:prod") == [
        "cProd", "cEAN", "xProd", "NCM", "CFOP", "uCom", "qCom", "vUnCom",
        "vProd", "cEANTrib", "uTrib", "qTrib", "vUnTrib", "indTot",
    ]
    assert _children(xml, "nfe:imposto") == ["ICMS", "PIS", "COFINS"]
    assert _text(xml, "nfe:prod/nfe:cEAN") == "SEM GTIN"
    assert _text(xml, "nfe:prod/nfe:cEANTrib") == "SEM GTIN"
    assert _text(xml, "nfe:prod/nfe:vProd") == "100.00"
    assert _text(xml, "nfe:imposto/nfe:ICMS/nfe:ICMSSN102/nfe:CSOSN") == "102"
    assert _text(xml, "nfe:imposto/nfe:PIS/nfe:PISNT/nfe:CST") == "07"
    assert _text(xml, "nfe:imposto/nfe:COFINS/nfe:COFINSNT/nfe:CST") == "07"


def test_det_with_barcode():
    xml = build_det_xml(_item(barcode="7891234567895"))
    assert _text(xml, "nfe:prod/nfe:cEAN") == "7891234567895"


def test_simples_nacional_csosn():
    taxes = compute_item_taxes(_item(tax_regime="SIMPLES_NACIONAL", csosn="103", origin="2"))

    assert taxes.icms_group == "ICMSSN102"
    assert taxes.csosn == "103"
    assert taxes.origin == "2"
    assert taxes.icms_value == Decimal("0")


def test_icms00_defaults():
    item = _item(tax_regime="LUCRO_REAL", cst_icms="0", icms_rate=Decimal("18"))
    taxes = compute_item_taxes(item)

    assert taxes.icms_group == "ICMS00"
    assert taxes.cst_icms == "00"
    assert taxes.icms_bc_mode == "3"
    assert taxes.icms_base == Decimal("100.00")
    assert taxes.icms_value == Decimal("18.00")

    xml = build_det_xml(item, taxes)
    assert _children(xml, "nfe:imposto/nfe:ICMS/nfe:ICMS00") == ["orig", "CST", "modBC", "vBC", "pICMS", "vICMS"]
    assert _text(xml, "nfe:imposto/nfe:ICMS/nfe:ICMS00/nfe:vICMS") == "18.00"


def test_pis_cofins_presumido_default_rates():
    item = _item(tax_regime="LUCRO_PRESUMIDO", cst_pis="1", cst_cofins="01")
    taxes = compute_item_taxes(item)

    assert taxes.pis_taxed and taxes.cofins_taxed
    assert taxes.cst_pis == "01"
    assert taxes.pis_rate == Decimal("0.65")
    assert taxes.pis_value == Decimal("0.65")
    assert taxes.cofins_value == Decimal("3.00")

    xml = build_det_xml(item, taxes)
    assert _children(xml, "nfe:imposto/nfe:PIS/nfe:PISAliq") == ["CST", "vBC", "pPIS", "vPIS"]
    assert _children(xml, "nfe:imposto/nfe:COFINS/nfe:COFINSAliq") == ["CST", "vBC", "pCOFINS", "vCOFINS"]


def test_pis_taxed_outside_presumido_defaults_to_zero_rate():
    taxes = compute_item_taxes(_item(tax_regime="LUCRO_REAL", cst_pis="02"))

    assert taxes.pis_taxed
    assert taxes.pis_value == Decimal("0.00")


def test_non_taxed_pis_keeps_given_cst():
    taxes = compute_item_taxes(_item(cst_pis="06", cst_cofins="08"))

    assert not taxes.pis_taxed
    assert taxes.cst_pis == "06"
    assert taxes.cst_cofins == "08"


def test_control_characters_are_removed():
    """Caracteres de controle do cadastro nao quebram a serializacao"""
    xml = build_det_xml(_item(description="PECA\x0bTESTE\x00 NOVA\x1f"))
    assert _text(xml, "nfe:prod/nfe:xProd") == "PECATESTE NOVA"


def test_dest_without_document_keeps_cpf_element():
    recipient = Recipient(name="SEM DOCUMENTO", address=_address())
    assert _children(build_dest_xml(recipient))[0] == "CPF"
