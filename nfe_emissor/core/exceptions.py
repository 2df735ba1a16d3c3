"""
NF-e Emissor - Exceptions
"""
from typing import List, Any


class NFeError(Exception):
    """Erro base do emissor"""


class ConfigurationError(NFeError):
    """Configuracao ausente ou invalida (ex: arquivo .pfx inexistente)"""


class CredentialError(NFeError):
    """Senha do certificado incorreta ou container PKCS#12 corrompido"""


class IntegrityError(NFeError):
    """Conteudo esperado do certificado ausente ou vazio"""


class InputError(NFeError, ValueError):
    """Parametro fora da faixa aceita pelo layout da NF-e"""


class IssuerValidationError(NFeError):
    """Emitente com dados incompletos para emitir NF-e"""

    def __init__(self, issues: List[Any]):
        self.issues = list(issues)
        campos = ", ".join(issue.field for issue in self.issues)
        super().__init__(f"Emitente com dados incompletos para emitir NF-e: {campos}")


class CertificateTimeoutError(NFeError):
    """Leitura do certificado excedeu o tempo limite"""
