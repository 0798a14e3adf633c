from .admission import AdmissionPort, PermitPort
from .browser import (
    BrowserHandlePort,
    BrowserLauncher,
    BrowserPoolPort,
    DocumentRendererPort,
    ExecutableProbePort,
)
from .content import BarcodePort, CompanyRegistryPort, TemplatePort

__all__ = [
    "AdmissionPort",
    "BarcodePort",
    "BrowserHandlePort",
    "BrowserLauncher",
    "BrowserPoolPort",
    "CompanyRegistryPort",
    "DocumentRendererPort",
    "ExecutableProbePort",
    "PermitPort",
    "TemplatePort",
]
