from .company import CompanyProfile, NFeEnvironment
from .customer import Customer
from .nfe import (
    TaxRegime,
    Address,
    Issuer,
    Recipient,
    Identification,
    LineItem,
    ItemTaxes,
    ValidationIssue,
    CertificatePem,
    IssuanceOptions,
    InvoicePreview,
    InvoiceTotals
)

__all__ = [
    "CompanyProfile",
    "NFeEnvironment",
    "Customer",
    "TaxRegime",
    "Address",
    "Issuer",
    "Recipient",
    "Identification",
    "LineItem",
    "ItemTaxes",
    "ValidationIssue",
    "CertificatePem",
    "IssuanceOptions",
    "InvoicePreview",
    "InvoiceTotals"
]
