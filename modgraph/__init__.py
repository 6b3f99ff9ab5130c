"""
modgraph - dependency graphs and cohesion metrics for component-based UI code.
"""

from .config import (
    ConfigurationError,
    ScannerOptions,
    CompilerConfig,
    load_compiler_config,
    discover_files
)

from .scanner import RepositoryScanner

from .analysis import CohesionAnalyzer, CohesionWeights

__all__ = [
    "ConfigurationError",
    "ScannerOptions",
    "CompilerConfig",
    "load_compiler_config",
    "discover_files",
    "RepositoryScanner",
    "CohesionAnalyzer",
    "CohesionWeights",
]
