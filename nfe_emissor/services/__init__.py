from .access_key import (
    AccessKey,
    generate_access_key,
    generate_random_code,
    calculate_check_digit,
    is_valid_access_key
)
from .certificate import (
    resolve_certificate_path,
    load_certificate,
    load_certificate_bytes,
    load_certificate_async,
    shutdown_certificate_pool
)
from .mappers import map_company_to_issuer, map_recipient_from_customer
from .validator import validate_issuer, ensure_valid_issuer
from .xml_builders import (
    compute_item_taxes,
    build_ide_xml,
    build_emit_xml,
    build_dest_xml,
    build_det_xml
)
from .assembler import (
    IdentificationResult,
    build_identification_for_company,
    build_invoice_preview_xml
)
from .events import build_cancellation_event, build_nfe_proc

__all__ = [
    "AccessKey",
    "generate_access_key",
    "generate_random_code",
    "calculate_check_digit",
    "is_valid_access_key",
    "resolve_certificate_path",
    "load_certificate",
    "load_certificate_bytes",
    "load_certificate_async",
    "shutdown_certificate_pool",
    "map_company_to_issuer",
    "map_recipient_from_customer",
    "validate_issuer",
    "ensure_valid_issuer",
    "compute_item_taxes",
    "build_ide_xml",
    "build_emit_xml",
    "build_dest_xml",
    "build_det_xml",
    "IdentificationResult",
    "build_identification_for_company",
    "build_invoice_preview_xml",
    "build_cancellation_event",
    "build_nfe_proc"
]
