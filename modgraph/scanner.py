"""
Repository scanning.

Discovers source files, parses them (optionally on a thread pool),
and assembles the dependency graph. Graphs are cached per scanner,
keyed by the scan root and a digest of the configuration, so a
changed configuration produces a fresh scan.
"""

import os
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Tuple

from .config import (
    ConfigurationError,
    CompilerConfig,
    ScannerOptions,
    discover_files,
    load_compiler_config
)
from .core.entities import SourceFile
from .core.parser import parse_file
from .graph.builder import DependencyGraphBuilder
from .graph.module_graph import DependencyGraph


CacheKey = Tuple[str, str]


class RepositoryScanner:
    """
    Scans a UI codebase into a DependencyGraph.

    Usage:
        scanner = RepositoryScanner("path/to/tsconfig.json")
        graph = scanner.scan_repository("path/to/repo")
    """

    def __init__(self, tsconfig_file: str, options: Optional[ScannerOptions] = None):
        """
        Args:
            tsconfig_file: Path to the compiler configuration
            options: Scanner options; defaults plus MODGRAPH_* env overrides

        Raises:
            ConfigurationError: if the compiler configuration cannot be loaded
        """
        self.tsconfig_file = os.path.abspath(tsconfig_file)
        self.compiler_config: CompilerConfig = load_compiler_config(self.tsconfig_file)
        self.options = options or ScannerOptions().with_env_overrides()
        self.source_files: List[SourceFile] = []
        self._cache: Dict[CacheKey, DependencyGraph] = {}

    def _log(self, message: str) -> None:
        if self.options.debug:
            print(message)

    def cache_key(self, root_dir: str, options: ScannerOptions) -> CacheKey:
        digest = f"{options.digest()}:{self.compiler_config.digest()}"
        return os.path.abspath(root_dir), digest

    def clear_cache(self) -> None:
        self._cache.clear()

    def _parse(self, file_path: str, root_dir: str, options: ScannerOptions) -> Optional[SourceFile]:
        try:
            source = parse_file(
                file_path,
                root_dir,
                possible_extensions=options.possible_extensions,
                internal_packages=options.internal_packages,
                internal_package_prefix=options.internal_package_prefix
            )
        except Exception as e:
            print(f"  [ERROR] Error parsing {file_path}: {e}", file=sys.stderr)
            return None

        if not source.parse_success:
            print(f"  [WARN] Skipping {file_path}: {'; '.join(source.parse_errors)}", file=sys.stderr)
            return None
        if source.parse_errors:
            self._log(f"  [WARN] {file_path}: {'; '.join(source.parse_errors)}")
        return source

    def parse_files(self, file_paths: List[str], root_dir: str, options: ScannerOptions) -> List[SourceFile]:
        """
        Parse files into isolated extraction results.

        Files are independent, so with max_workers > 1 they are parsed
        on a thread pool. Results keep the input order.
        """
        if options.max_workers > 1 and len(file_paths) > 1:
            with ThreadPoolExecutor(max_workers=options.max_workers) as pool:
                results = list(pool.map(
                    lambda path: self._parse(path, root_dir, options),
                    file_paths
                ))
        else:
            results = []
            for path in file_paths:
                self._log(f"  -> Parsing {os.path.basename(path)}...")
                results.append(self._parse(path, root_dir, options))

        return [r for r in results if r is not None]

    def scan_repository(self, root_dir: str, options: Optional[ScannerOptions] = None) -> DependencyGraph:
        """
        Scan a repository and build its dependency graph.

        Args:
            root_dir: Directory to scan
            options: Overrides the scanner's options for this call

        Returns:
            The DependencyGraph; a cached graph when the root and
            configuration are unchanged since an earlier scan

        Raises:
            ConfigurationError: if root_dir does not exist
        """
        options = options or self.options
        root_dir = os.path.abspath(root_dir)

        if not os.path.isdir(root_dir):
            raise ConfigurationError(f"Root directory not found: {root_dir}")

        key = self.cache_key(root_dir, options)
        if key in self._cache:
            self._log(f"[*] Using cached graph for {root_dir}")
            return self._cache[key]

        self._log(f"[*] Scanning Repository: {root_dir}...")
        file_paths = discover_files(root_dir, options, self.compiler_config)
        self._log(f"[INFO] Found {len(file_paths)} source files")

        self.source_files = self.parse_files(file_paths, root_dir, options)

        # Graph mutation stays on this thread
        builder = DependencyGraphBuilder(
            root_dir,
            internal_packages=options.internal_packages,
            internal_package_prefix=options.internal_package_prefix,
            debug=options.debug
        )
        graph = builder.build(self.source_files)

        stats = graph.get_statistics()
        self._log(f"[OK] Graph: {stats['nodes']} nodes, {stats['edges']} edges")

        self._cache[key] = graph
        return graph
