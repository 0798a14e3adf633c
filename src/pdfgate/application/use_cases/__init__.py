from .company_report import GenerateCompanyReportUseCase, normalize_cnpj
from .generate_alvara import GenerateAlvaraUseCase

__all__ = [
    "GenerateAlvaraUseCase",
    "GenerateCompanyReportUseCase",
    "normalize_cnpj",
]
