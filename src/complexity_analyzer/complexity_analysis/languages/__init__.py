"""Language-specific structural scanner implementations.

This module contains concrete implementations of the StructuralScanner
interface for the built-in brace-delimited languages.
"""

from .cpp_analyzer import CppScanner
from .csharp_analyzer import CSharpScanner
from .java_analyzer import JavaScanner
from .javascript_analyzer import JavaScriptScanner

# Registration order of the default registry
BUILTIN_SCANNERS = (JavaScanner, JavaScriptScanner, CppScanner, CSharpScanner)

__all__ = [
    "BUILTIN_SCANNERS",
    "CppScanner",
    "CSharpScanner",
    "JavaScanner",
    "JavaScriptScanner",
]
