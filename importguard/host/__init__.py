"""Host integration: language service protocol, policy decorator, Python host."""

from .adapter import PolicyLanguageService, create_plugin, violation_to_diagnostic
from .protocol import Diagnostic, DiagnosticCategory, LanguageService, SourceFile
from .python_source import PythonLanguageService, extract_imports

__all__ = [
    "Diagnostic",
    "DiagnosticCategory",
    "LanguageService",
    "PolicyLanguageService",
    "PythonLanguageService",
    "SourceFile",
    "create_plugin",
    "extract_imports",
    "violation_to_diagnostic",
]
