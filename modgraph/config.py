"""
Scanner configuration and source file discovery.

Options come from three places, later ones winning:
1. Defaults on ScannerOptions
2. An optional YAML options file (ScannerOptions.from_yaml)
3. Environment variables:
    - MODGRAPH_DEBUG        → "1"/"true" enables diagnostics
    - MODGRAPH_MAX_WORKERS  → parser threads (1 = sequential)

The compiler configuration (tsconfig.json) supplies include/exclude
patterns when no explicit file patterns are given.
"""

import os
import json
import fnmatch
import hashlib
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

import yaml

from .core.parser import LANGUAGE_BY_EXTENSION
from .core.resolver import DEFAULT_EXTENSIONS


DEFAULT_FILE_PATTERNS = ["**/*.ts", "**/*.tsx", "**/*.js", "**/*.jsx"]
DEFAULT_IGNORE_PATTERNS = ["**/node_modules/**", "**/dist/**", "**/build/**"]

GLOB_CHARS = set("*?[")


class ConfigurationError(ValueError):
    """Missing or unreadable configuration, raised before scanning starts."""


@dataclass
class ScannerOptions:
    """
    Options recognized by the repository scanner.

    `ignore_patterns` are added to DEFAULT_IGNORE_PATTERNS, never
    replacing them. `debug` only controls diagnostic output.
    """
    file_patterns: List[str] = field(default_factory=list)
    ignore_patterns: List[str] = field(default_factory=list)
    internal_packages: List[str] = field(default_factory=list)
    internal_package_prefix: Optional[str] = None
    possible_extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    debug: bool = False
    max_workers: int = 1

    @property
    def all_ignore_patterns(self) -> List[str]:
        return DEFAULT_IGNORE_PATTERNS + [
            p for p in self.ignore_patterns if p not in DEFAULT_IGNORE_PATTERNS
        ]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScannerOptions":
        """Build options from a plain mapping, ignoring unknown keys."""
        options = cls()
        for key in ("file_patterns", "ignore_patterns", "internal_packages", "possible_extensions"):
            if data.get(key) is not None:
                setattr(options, key, [str(v) for v in data[key]])
        if data.get("internal_package_prefix"):
            options.internal_package_prefix = str(data["internal_package_prefix"])
        if "debug" in data:
            options.debug = bool(data["debug"])
        if data.get("max_workers") is not None:
            options.max_workers = max(1, int(data["max_workers"]))
        return options

    @classmethod
    def from_yaml(cls, config_path: str) -> "ScannerOptions":
        """
        Load options from a YAML file.

        Args:
            config_path: Path to e.g. .modgraph.yaml

        Raises:
            ConfigurationError: if the file is missing or malformed
        """
        try:
            with open(config_path, "r") as f:
                raw_config = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigurationError(f"Cannot read options file '{config_path}': {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in '{config_path}': {e}") from e

        if not isinstance(raw_config, dict):
            raise ConfigurationError(f"Options file '{config_path}' must contain a mapping")

        return cls.from_dict(raw_config)

    def with_env_overrides(self) -> "ScannerOptions":
        """Apply MODGRAPH_* environment variables in place."""
        debug = os.getenv("MODGRAPH_DEBUG")
        if debug is not None:
            self.debug = debug.lower() in ("1", "true", "yes", "on")

        workers = os.getenv("MODGRAPH_MAX_WORKERS")
        if workers:
            try:
                self.max_workers = max(1, int(workers))
            except ValueError:
                raise ConfigurationError(f"MODGRAPH_MAX_WORKERS must be an integer, got '{workers}'")

        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def digest(self) -> str:
        """Stable hash of every option that can change scan results."""
        relevant = self.to_dict()
        # Diagnostics and threading do not change the graph
        relevant.pop("debug")
        relevant.pop("max_workers")
        payload = json.dumps(relevant, sort_keys=True)
        return hashlib.sha256(payload.encode("utf8")).hexdigest()[:16]


@dataclass
class CompilerConfig:
    """The parts of a tsconfig.json the scanner uses."""
    config_path: str
    base_dir: str
    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict)

    def digest(self) -> str:
        payload = json.dumps(self.raw, sort_keys=True, default=str)
        return hashlib.sha256(payload.encode("utf8")).hexdigest()[:16]


def strip_json_comments(text: str) -> str:
    """
    Remove // and /* */ comments and trailing commas from JSON text.

    String literals are left untouched, so "@/*" path aliases survive.
    """
    out = []
    i = 0
    length = len(text)
    in_string = False

    while i < length:
        char = text[i]

        if in_string:
            out.append(char)
            if char == "\\" and i + 1 < length:
                out.append(text[i + 1])
                i += 2
                continue
            if char == '"':
                in_string = False
            i += 1
            continue

        if char == '"':
            in_string = True
            out.append(char)
            i += 1
        elif text.startswith("//", i):
            newline = text.find("\n", i)
            i = length if newline == -1 else newline
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = length if end == -1 else end + 2
        elif char in "}]":
            # Drop a trailing comma before the closing bracket
            j = len(out) - 1
            while j >= 0 and out[j].isspace():
                j -= 1
            if j >= 0 and out[j] == ",":
                del out[j]
            out.append(char)
            i += 1
        else:
            out.append(char)
            i += 1

    return "".join(out)


def load_compiler_config(config_path: str, _seen: Optional[set] = None) -> CompilerConfig:
    """
    Load a tsconfig.json, following relative "extends" chains.

    Args:
        config_path: Path to the tsconfig file

    Returns:
        CompilerConfig with include/exclude resolved for this file

    Raises:
        ConfigurationError: if the file is missing, unreadable or not JSON
    """
    config_path = os.path.abspath(config_path)
    seen = _seen if _seen is not None else set()
    if config_path in seen:
        raise ConfigurationError(f"Circular 'extends' in {config_path}")
    seen.add(config_path)

    if not os.path.isfile(config_path):
        raise ConfigurationError(f"Compiler configuration not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf8") as f:
            raw = json.loads(strip_json_comments(f.read()) or "{}")
    except OSError as e:
        raise ConfigurationError(f"Cannot read {config_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {config_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError(f"{config_path} must contain a JSON object")

    base_dir = os.path.dirname(config_path)
    config = CompilerConfig(config_path=config_path, base_dir=base_dir, raw=raw)

    extends = raw.get("extends")
    if isinstance(extends, str) and extends.startswith("."):
        parent_path = os.path.normpath(os.path.join(base_dir, extends))
        if not parent_path.endswith(".json"):
            parent_path += ".json"
        parent = load_compiler_config(parent_path, seen)
        config.include = list(parent.include)
        config.exclude = list(parent.exclude)

    if isinstance(raw.get("include"), list):
        config.include = [str(p) for p in raw["include"]]
    if isinstance(raw.get("exclude"), list):
        config.exclude = [str(p) for p in raw["exclude"]]

    return config


def _to_glob(pattern: str) -> str:
    """tsconfig treats a bare directory entry as everything beneath it."""
    pattern = pattern.replace("\\", "/")
    if pattern.startswith("./"):
        pattern = pattern[2:]
    last = pattern.rstrip("/").split("/")[-1]
    if not (GLOB_CHARS & set(pattern)) and "." not in last:
        return pattern.rstrip("/") + "/**/*"
    return pattern


def _split(path: str) -> List[str]:
    path = path.replace("\\", "/")
    if path.startswith("./"):
        path = path[2:]
    return [part for part in path.strip("/").split("/") if part]


def _match_parts(parts: List[str], pattern_parts: List[str]) -> bool:
    if not pattern_parts:
        return not parts
    head, rest = pattern_parts[0], pattern_parts[1:]
    if head == "**":
        # Zero or more whole segments
        return any(_match_parts(parts[i:], rest) for i in range(len(parts) + 1))
    if not parts:
        return False
    return fnmatch.fnmatch(parts[0], head) and _match_parts(parts[1:], rest)


def matches_pattern(rel_path: str, pattern: str) -> bool:
    """
    Glob match for a root-relative POSIX path.

    Matching is per path segment: "*" stays inside one segment and a
    "**" segment spans zero or more of them. So "src/*.tsx" matches
    "src/a.tsx" but not "src/deep/b.tsx", while "**/dist/**" matches
    "dist/app.js".
    """
    return _match_parts(_split(rel_path), _split(pattern))


def _matches_any(rel_path: str, patterns: List[str]) -> bool:
    return any(matches_pattern(rel_path, p) for p in patterns)


def _ignores_directory(rel_dir: str, patterns: List[str]) -> bool:
    """A directory is pruned when a pattern ignores everything beneath it."""
    for pattern in patterns:
        for suffix in ("/**/*", "/**"):
            if pattern.endswith(suffix) and matches_pattern(rel_dir, pattern[:-len(suffix)]):
                return True
    return False


def discover_files(
    root_dir: str,
    options: ScannerOptions,
    compiler_config: Optional[CompilerConfig] = None
) -> List[str]:
    """
    Find the source files to scan.

    Args:
        root_dir: Directory to scan
        options: Scanner options (file/ignore patterns)
        compiler_config: Optional tsconfig; its include/exclude apply
                         when options.file_patterns is empty

    Returns:
        Sorted absolute file paths. Declaration files (*.d.ts) are skipped.
    """
    root_dir = os.path.abspath(root_dir)

    include = list(options.file_patterns)
    ignore = options.all_ignore_patterns
    restrict_extensions = False

    if not include and compiler_config is not None and compiler_config.include:
        include = [_to_glob(p) for p in compiler_config.include]
        restrict_extensions = True
    if not include:
        include = list(DEFAULT_FILE_PATTERNS)
    if compiler_config is not None:
        ignore = ignore + [_to_glob(p) for p in compiler_config.exclude]

    found = []
    for current, dirs, files in os.walk(root_dir):
        rel_dir = os.path.relpath(current, root_dir).replace(os.sep, "/")
        rel_dir = "" if rel_dir == "." else rel_dir + "/"

        # Prune ignored directories before descending
        dirs[:] = sorted(
            d for d in dirs if not _ignores_directory(f"{rel_dir}{d}", ignore)
        )

        for file in files:
            rel_path = f"{rel_dir}{file}"
            if file.endswith(".d.ts"):
                continue
            if restrict_extensions and os.path.splitext(file)[1].lower() not in LANGUAGE_BY_EXTENSION:
                continue
            if not _matches_any(rel_path, include):
                continue
            if _matches_any(rel_path, ignore):
                continue
            found.append(os.path.join(current, file))

    return sorted(found)
