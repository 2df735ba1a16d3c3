"""
Certificado Digital A1 (.pfx / PKCS#12)

Extrai a chave privada e o certificado em PEM para a etapa de assinatura.
O material extraido vive apenas durante a chamada: nada e gravado em disco
nem mantido em cache.
"""
import asyncio
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

from cryptography.hazmat.primitives.serialization import pkcs12
from cryptography.hazmat.primitives.serialization import Encoding, PrivateFormat, NoEncryption

from nfe_emissor.core.config import Settings, get_settings
from nfe_emissor.core.exceptions import (
    ConfigurationError,
    CredentialError,
    IntegrityError,
    CertificateTimeoutError
)
from nfe_emissor.schemas import CompanyProfile, CertificatePem

logger = logging.getLogger(__name__)

_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


def resolve_certificate_path(company: CompanyProfile, settings: Optional[Settings] = None) -> Path:
    """
    Resolve o caminho do .pfx: cadastro da empresa, depois NFE_CERT_PFX_PATH,
    depois o caminho padrao.
    """
    settings = settings or get_settings()

    raw_path = company.certificate_path or settings.NFE_CERT_PFX_PATH
    if not raw_path:
        logger.warning(
            f"Empresa {company.id} sem caminho de certificado; usando padrao {settings.NFE_CERT_DEFAULT_PATH}"
        )
        raw_path = settings.NFE_CERT_DEFAULT_PATH

    return Path(raw_path).expanduser().resolve()


def load_certificate_bytes(pfx_data: bytes, password: Optional[str]) -> CertificatePem:
    """
    Abre o container PKCS#12 e converte chave e certificado para PEM.

    Args:
        pfx_data: Bytes do arquivo .pfx
        password: Senha do certificado (vazia e permitida)

    Returns:
        CertificatePem com private_key_pem e certificate_pem
    """
    try:
        bundle = pkcs12.load_pkcs12(
            pfx_data,
            password.encode() if password else None
        )
    except ValueError as e:
        raise CredentialError(
            f"Falha ao abrir o PFX. Verifique a senha do certificado. Detalhe: {e}"
        ) from e

    if bundle.key is None:
        raise IntegrityError("Nao foi possivel localizar a chave privada dentro do PFX.")

    # Certificado da chave; sem ele, o primeiro certificado do container
    cert_entry = bundle.cert
    if cert_entry is None and bundle.additional_certs:
        cert_entry = bundle.additional_certs[0]
    if cert_entry is None:
        raise IntegrityError("Nao foi possivel localizar o certificado dentro do PFX.")

    private_key_pem = bundle.key.private_bytes(
        Encoding.PEM,
        PrivateFormat.TraditionalOpenSSL,
        NoEncryption()
    ).decode('ascii')
    certificate_pem = cert_entry.certificate.public_bytes(Encoding.PEM).decode('ascii')

    if not private_key_pem.strip():
        raise IntegrityError("Chave privada PEM extraida do PFX esta vazia.")
    if not certificate_pem.strip():
        raise IntegrityError("Certificado PEM extraido do PFX esta vazio.")

    # Loga apenas tamanhos, nunca o conteudo
    logger.info(
        f"Certificado A1 carregado: privateKeyPem={len(private_key_pem)} "
        f"certificatePem={len(certificate_pem)} bytes"
    )

    return CertificatePem(private_key_pem=private_key_pem, certificate_pem=certificate_pem)


def load_certificate(company: CompanyProfile, settings: Optional[Settings] = None) -> CertificatePem:
    """
    Le o .pfx da empresa e extrai chave privada e certificado em PEM.

    Raises:
        ConfigurationError: arquivo inexistente ou ilegivel
        CredentialError: senha incorreta ou container corrompido
        IntegrityError: chave ou certificado ausentes / PEM vazio
    """
    pfx_path = resolve_certificate_path(company, settings)

    if not pfx_path.is_file():
        raise ConfigurationError(f"Arquivo PFX nao encontrado em: {pfx_path}")

    try:
        pfx_data = pfx_path.read_bytes()
    except OSError as e:
        raise ConfigurationError(f"Nao foi possivel ler o PFX em {pfx_path}: {e}") from e

    return load_certificate_bytes(pfx_data, company.certificate_password or '')


def _get_executor(max_workers: int) -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="nfe-cert")
        return _executor


def shutdown_certificate_pool():
    """Encerra o pool de leitura de certificados (shutdown da aplicacao)"""
    global _executor
    with _executor_lock:
        if _executor is not None:
            _executor.shutdown(wait=True)
            _executor = None


async def load_certificate_async(
    company: CompanyProfile,
    settings: Optional[Settings] = None
) -> CertificatePem:
    """
    Versao para event loop: o parse do PKCS#12 roda no pool limitado
    (NFE_CERT_WORKERS) com timeout NFE_CERT_TIMEOUT_SECONDS.
    """
    settings = settings or get_settings()
    loop = asyncio.get_running_loop()
    future = loop.run_in_executor(
        _get_executor(settings.NFE_CERT_WORKERS),
        load_certificate,
        company,
        settings
    )

    try:
        return await asyncio.wait_for(future, timeout=settings.NFE_CERT_TIMEOUT_SECONDS)
    except asyncio.TimeoutError as e:
        logger.error(f"Timeout ao carregar certificado da empresa {company.id}")
        raise CertificateTimeoutError(
            f"Leitura do certificado excedeu {settings.NFE_CERT_TIMEOUT_SECONDS}s"
        ) from e
