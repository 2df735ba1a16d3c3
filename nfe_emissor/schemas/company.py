"""
NF-e Emissor - Company Schemas
Registro da tabela "empresa" usado como emitente da NF-e
"""
from pydantic import BaseModel, Field
from typing import Optional
import enum


class NFeEnvironment(str, enum.Enum):
    """Ambiente de emissao (tpAmb)"""
    PRODUCAO = "PRODUCAO"
    HOMOLOGACAO = "HOMOLOGACAO"


class CompanyProfile(BaseModel):
    """
    Snapshot da empresa emitente.

    Aceita tanto os nomes das colunas persistidas (razaosocial,
    codigomunicipio...) quanto os nomes dos campos.
    """
    id: Optional[int] = None
    cnpj: Optional[str] = None
    legal_name: Optional[str] = Field(None, alias="razaosocial")
    trade_name: Optional[str] = Field(None, alias="nomefantasia")
    state_registration: Optional[str] = Field(None, alias="inscricaoestadual")
    state_registration_st: Optional[str] = Field(None, alias="inscricaoestadualst")
    municipal_registration: Optional[str] = Field(None, alias="inscricaomunicipal")
    cnae: Optional[str] = None
    tax_regime: Optional[str] = Field(None, alias="regimetributario")

    street: Optional[str] = Field(None, alias="endereco")
    number: Optional[str] = Field(None, alias="numero")
    complement: Optional[str] = Field(None, alias="complemento")
    neighborhood: Optional[str] = Field(None, alias="bairro")
    municipality_code: Optional[str] = Field(None, alias="codigomunicipio")
    uf: Optional[str] = None
    cep: Optional[str] = None
    country_code: Optional[str] = Field(None, alias="codigopais")
    country_name: Optional[str] = Field(None, alias="nomepais")
    phone: Optional[str] = Field(None, alias="telefone")

    environment: Optional[str] = Field(None, alias="ambiente")
    certificate_path: Optional[str] = Field(None, alias="certificadocaminho")
    certificate_password: Optional[str] = Field(None, alias="certificadosenha", repr=False)

    @property
    def is_production(self) -> bool:
        return (self.environment or '').upper() in (NFeEnvironment.PRODUCAO.value, "PRODUCTION")

    class Config:
        populate_by_name = True
        from_attributes = True
        coerce_numbers_to_str = True
        extra = "ignore"
