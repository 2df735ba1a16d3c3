"""
NF-e Emissor - Configuration
"""
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv

# Carrega .env da raiz do projeto sem sobrescrever variaveis ja definidas
env_file = Path(__file__).parent.parent.parent / ".env"
if env_file.exists():
    load_dotenv(env_file)


class Settings(BaseSettings):
    # Certificado A1 (.pfx)
    # Usado quando a empresa nao tem caminho proprio cadastrado
    NFE_CERT_PFX_PATH: Optional[str] = None
    NFE_CERT_DEFAULT_PATH: str = "C:\\certs\\certificado.pfx"
    NFE_CERT_WORKERS: int = 2
    NFE_CERT_TIMEOUT_SECONDS: float = 10.0

    # Identificacao da NF-e
    NFE_UF_CODE: str = "25"  # PB
    NFE_MODEL: str = "55"  # NF-e
    NFE_TIMEZONE: str = "America/Fortaleza"
    NFE_NATUREZA_OPERACAO: str = "VENDA DE MERCADORIA"
    NFE_VER_PROC: str = "ERPOficina 1.0.0"
    NFE_MUNICIPALITY_NAME: str = "JOAO PESSOA"
    NFE_INF_CPL: str = "NF-e de teste em homologação."

    class Config:
        extra = "ignore"
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
