"""
Validacao do emitente

Confere se o registro da empresa tem os dados minimos para ser usado como
emitente da NF-e. Retorna a lista de problemas em vez de lancar excecao;
lista vazia significa que a montagem pode prosseguir.
"""
from typing import List

from nfe_emissor.core.exceptions import IssuerValidationError
from nfe_emissor.schemas import CompanyProfile, ValidationIssue
from nfe_emissor.utils.formatting import only_digits, is_blank

VALID_TAX_REGIMES = ("1", "2", "3")


def validate_issuer(company: CompanyProfile) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []

    def add(field: str, message: str):
        issues.append(ValidationIssue(field=field, message=message))

    # CNPJ
    if is_blank(company.cnpj):
        add("cnpj", "CNPJ e obrigatorio.")
    elif len(only_digits(company.cnpj)) != 14:
        add("cnpj", "CNPJ deve ter 14 digitos numericos.")

    if is_blank(company.legal_name):
        add("razaosocial", "Razao social e obrigatoria.")

    if is_blank(company.state_registration):
        add("inscricaoestadual", "Inscricao estadual e obrigatoria.")

    # Endereco
    if is_blank(company.street):
        add("endereco", "Endereco (logradouro) e obrigatorio.")

    if is_blank(company.number):
        add("numero", "Numero do endereco e obrigatorio.")

    if is_blank(company.neighborhood):
        add("bairro", "Bairro e obrigatorio.")

    cep = only_digits(company.cep)
    if not cep:
        add("cep", "CEP e obrigatorio.")
    elif len(cep) != 8:
        add("cep", "CEP deve ter 8 digitos numericos.")

    if is_blank(company.uf):
        add("uf", "UF e obrigatoria.")
    elif len(company.uf) != 2:
        add("uf", "UF deve ter 2 caracteres (ex: PB).")

    # Codigo do municipio (IBGE)
    if is_blank(company.municipality_code):
        add("codigomunicipio", "Codigo do municipio (IBGE) e obrigatorio.")
    elif len(only_digits(company.municipality_code)) != 7:
        add("codigomunicipio", "Codigo do municipio (IBGE) deve ter 7 digitos numericos.")

    # Regime tributario (CRT)
    if is_blank(company.tax_regime):
        add("regimetributario", "Regime tributario (CRT) e obrigatorio.")
    elif company.tax_regime not in VALID_TAX_REGIMES:
        add("regimetributario", "Regime tributario (CRT) deve ser 1, 2 ou 3.")

    if is_blank(company.country_code):
        add("codigopais", "Codigo do pais e obrigatorio (Brasil = 1058).")

    if is_blank(company.country_name):
        add("nomepais", "Nome do pais e obrigatorio (BRASIL).")

    # Telefone e opcional na NF-e; so valida se preenchido
    if not is_blank(company.phone):
        phone = only_digits(company.phone)
        if len(phone) < 10 or len(phone) > 11:
            add("telefone", "Telefone deve ter 10 ou 11 digitos (com DDD), apenas numeros.")

    return issues


def ensure_valid_issuer(company: CompanyProfile) -> None:
    """Mesma validacao, mas bloqueando: lanca IssuerValidationError"""
    issues = validate_issuer(company)
    if issues:
        raise IssuerValidationError(issues)
