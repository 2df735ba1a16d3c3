"""
Eventos e documento de distribuicao

- envEvento de cancelamento (tpEvento 110111)
- nfeProc: NF-e assinada + protocolo de autorizacao
"""
import copy
import logging
from datetime import datetime
from typing import Optional, Tuple

from lxml import etree

from nfe_emissor.core.config import get_settings
from nfe_emissor.core.exceptions import InputError
from nfe_emissor.services.access_key import AccessKey
from nfe_emissor.services.xml_builders import NFE_NAMESPACE, add_child, new_element
from nfe_emissor.utils.formatting import format_datetime_nfe, now_in_timezone, only_digits

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

CANCELLATION_EVENT_TYPE = "110111"
EVENT_VERSION = "1.00"
BATCH_ID = "000000000000001"
MAX_JUSTIFICATION_LENGTH = 255
MAX_EVENT_SEQUENCE = 20


def build_cancellation_event(
    uf_code: Optional[str],
    environment: int,
    cnpj: str,
    access_key: str,
    protocol: str,
    justification: str,
    sequence: int = 1,
    now: Optional[datetime] = None,
    timezone: Optional[str] = None
) -> Tuple[str, str]:
    """
    Gera o XML de evento de cancelamento de NF-e.

    Args:
        uf_code: cOrgao (codigo da UF); vazio usa a UF da chave
        environment: 1=Producao, 2=Homologacao
        cnpj: CNPJ do emitente
        access_key: Chave de acesso da NF-e (44 digitos)
        protocol: Protocolo de autorizacao original
        justification: Motivo do cancelamento (cortado em 255 caracteres)
        sequence: nSeqEvento (1..20)

    Returns:
        Tupla (xml, id do infEvento)
    """
    key = AccessKey(access_key)
    if isinstance(sequence, bool) or not isinstance(sequence, int) or not 1 <= sequence <= MAX_EVENT_SEQUENCE:
        raise InputError(f"nSeqEvento fora da faixa 1..{MAX_EVENT_SEQUENCE}: {sequence!r}")
    if environment not in (1, 2):
        raise InputError(f"tpAmb deve ser 1 ou 2: {environment!r}")

    if uf_code:
        c_orgao = only_digits(uf_code)
        if not c_orgao or len(c_orgao) > 2:
            raise InputError(f"cOrgao deve ser o codigo numerico da UF: {uf_code!r}")
        c_orgao = c_orgao.zfill(2)
    else:
        c_orgao = key.parts()["uf"]
    event_id = f"ID{CANCELLATION_EVENT_TYPE}{key.key}{str(sequence).zfill(2)}"

    x_just = (justification or '').strip()[:MAX_JUSTIFICATION_LENGTH]

    moment = now or now_in_timezone(timezone or get_settings().NFE_TIMEZONE)

    root = new_element('envEvento')
    root.set('versao', EVENT_VERSION)
    add_child(root, 'idLote', BATCH_ID)

    evento = add_child(root, 'evento')
    evento.set('versao', EVENT_VERSION)

    inf_evento = add_child(evento, 'infEvento')
    inf_evento.set('Id', event_id)
    add_child(inf_evento, 'cOrgao', c_orgao)
    add_child(inf_evento, 'tpAmb', environment)
    add_child(inf_evento, 'CNPJ', only_digits(cnpj))
    add_child(inf_evento, 'chNFe', key.key)
    add_child(inf_evento, 'dhEvento', format_datetime_nfe(moment))
    add_child(inf_evento, 'tpEvento', CANCELLATION_EVENT_TYPE)
    add_child(inf_evento, 'nSeqEvento', sequence)
    add_child(inf_evento, 'verEvento', EVENT_VERSION)

    det_evento = add_child(inf_evento, 'detEvento')
    det_evento.set('versao', EVENT_VERSION)
    add_child(det_evento, 'descEvento', 'Cancelamento')
    add_child(det_evento, 'nProt', (protocol or '').strip())
    add_child(det_evento, 'xJust', x_just)

    xml = XML_DECLARATION + etree.tostring(root, encoding='unicode')
    logger.info(f"Evento de cancelamento gerado: {event_id}")
    return xml, event_id


def _parse(xml: str, label: str) -> etree._Element:
    try:
        return etree.fromstring(xml.encode('utf-8'))
    except etree.XMLSyntaxError as e:
        raise InputError(f"XML invalido ({label}): {e}") from e


def _find(root: etree._Element, name: str) -> Optional[etree._Element]:
    tag = '{%s}%s' % (NFE_NAMESPACE, name)
    if root.tag == tag:
        return root
    return next(root.iter(tag), None)


def build_nfe_proc(signed_nfe_xml: str, authorization_response_xml: str) -> str:
    """
    Monta o nfeProc (NF-e + protocolo) conforme manual da NF-e.

    Args:
        signed_nfe_xml: XML da NFe ja assinada
        authorization_response_xml: Retorno da SEFAZ contendo <protNFe>

    Returns:
        XML do nfeProc com declaracao
    """
    if not signed_nfe_xml or not signed_nfe_xml.strip():
        raise InputError("XML da NF-e assinada nao informado")
    if not authorization_response_xml or not authorization_response_xml.strip():
        raise InputError("Retorno da SEFAZ nao informado")

    nfe = _find(_parse(signed_nfe_xml, "NFe"), 'NFe')
    if nfe is None:
        raise InputError("Nao foi encontrado <NFe> no XML assinado")

    prot_nfe = _find(_parse(authorization_response_xml, "retorno"), 'protNFe')
    if prot_nfe is None:
        raise InputError("Nao foi encontrado <protNFe> no retorno da SEFAZ")

    root = new_element('nfeProc')
    root.set('versao', "4.00")
    root.append(copy.deepcopy(nfe))
    root.append(copy.deepcopy(prot_nfe))
    etree.cleanup_namespaces(root)

    return XML_DECLARATION + etree.tostring(root, encoding='unicode')
