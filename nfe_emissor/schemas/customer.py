"""
NF-e Emissor - Customer Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional


class Customer(BaseModel):
    """Registro da tabela "cliente" usado para montar o destinatario"""
    id: Optional[int] = None
    document: str = Field("", alias="cpfcnpj")
    name: str = Field("", alias="nomerazaosocial")
    phone: Optional[str] = Field(None, alias="telefone")
    street: Optional[str] = Field(None, alias="endereco")
    number: Optional[str] = Field(None, alias="endereconumero")
    complement: Optional[str] = Field(None, alias="enderecocomplemento")
    neighborhood: Optional[str] = Field(None, alias="bairro")
    city: Optional[str] = Field(None, alias="cidade")
    state: Optional[str] = Field(None, alias="estado")
    cep: Optional[str] = None
    state_registration: Optional[str] = Field(None, alias="inscricaoestadual")
    municipality_code: Optional[str] = Field(None, alias="codigomunicipio")

    class Config:
        populate_by_name = True
        from_attributes = True
        coerce_numbers_to_str = True
        extra = "ignore"
