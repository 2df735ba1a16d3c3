"""Fixtures compartilhadas: empresa, cliente, itens, Settings e certificado A1 de teste."""
import datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import BestAvailableEncryption, pkcs12
from cryptography.x509.oid import NameOID

from nfe_emissor.core.config import Settings
from nfe_emissor.schemas import CompanyProfile, Customer, IssuanceOptions, LineItem

PFX_PASSWORD = "senha-teste"

COMPANY_ROW = {
    "id": 1,
    "cnpj": "12.345.678/0001-95",
    "razaosocial": "OFICINA TESTE LTDA",
    "nomefantasia": "OFICINA TESTE",
    "inscricaoestadual": "16.123.456-7",
    "regimetributario": "1",
    "endereco": "AV EPITACIO PESSOA",
    "numero": "1000",
    "bairro": "TAMBAU",
    "codigomunicipio": "2507507",
    "uf": "PB",
    "cep": "58039-000",
    "codigopais": "1058",
    "nomepais": "BRASIL",
    "telefone": "(83) 3222-1000",
    "ambiente": "HOMOLOGACAO",
}

CUSTOMER_ROW = {
    "id": 7,
    "tipopessoa": "F",
    "cpfcnpj": "529.982.247-25",
    "nomerazaosocial": "MARIA DA SILVA",
    "telefone": "(83) 99999-0000",
    "endereco": "RUA DAS FLORES",
    "endereconumero": "55",
    "bairro": "MANAIRA",
    "cidade": "JOAO PESSOA",
    "estado": "PB",
    "cep": "58038-000",
    "codigomunicipio": "2507507",
}


@pytest.fixture
def company_row():
    return dict(COMPANY_ROW)


@pytest.fixture
def company(company_row):
    return CompanyProfile(**company_row)


@pytest.fixture
def customer():
    return Customer(**CUSTOMER_ROW)


@pytest.fixture
def test_settings():
    return Settings(
        NFE_CERT_PFX_PATH=None,
        NFE_CERT_DEFAULT_PATH="/nao/existe/certificado.pfx",
        NFE_UF_CODE="25",
        NFE_MODEL="55",
        NFE_TIMEZONE="America/Fortaleza",
    )


@pytest.fixture
def fixed_now():
    return datetime.datetime(2025, 3, 10, 14, 30, 15, tzinfo=ZoneInfo("America/Fortaleza"))


@pytest.fixture
def options(fixed_now):
    return IssuanceOptions(now=fixed_now, random_code="12345678")


@pytest.fixture
def items():
    return [
        LineItem(
            product_code="P-10",
            description="FILTRO DE OLEO",
            ncm="84212300",
            cfop="5102",
            quantity=Decimal("2"),
            unit_price=Decimal("35.50"),
            line_total=Decimal("71.00"),
        ),
        LineItem(
            product_code="P-20",
            description="OLEO 5W30 1L",
            ncm="27101932",
            cfop="5102",
            quantity=Decimal("4"),
            unit_price=Decimal("42.25"),
            line_total=Decimal("169.00"),
            barcode="7891234567895",
        ),
    ]


@pytest.fixture(scope="session")
def pfx_bytes():
    """PKCS#12 autoassinado gerado em tempo de teste"""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    name = x509.Name([
        x509.NameAttribute(NameOID.COUNTRY_NAME, "BR"),
        x509.NameAttribute(NameOID.COMMON_NAME, "OFICINA TESTE LTDA:12345678000195"),
    ])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=365))
        .sign(key, hashes.SHA256())
    )
    return pkcs12.serialize_key_and_certificates(
        b"oficina-teste",
        key,
        cert,
        None,
        BestAvailableEncryption(PFX_PASSWORD.encode()),
    )


@pytest.fixture
def pfx_file(tmp_path, pfx_bytes):
    path = tmp_path / "certificado.pfx"
    path.write_bytes(pfx_bytes)
    return path


@pytest.fixture
def certified_company(company, pfx_file):
    return company.model_copy(update={
        "certificate_path": str(pfx_file),
        "certificate_password": PFX_PASSWORD,
    })
