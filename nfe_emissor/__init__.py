"""
NF-e Emissor - montagem de NF-e 4.00 (chave de acesso, certificado A1, XML)
"""
__version__ = "1.0.0"
