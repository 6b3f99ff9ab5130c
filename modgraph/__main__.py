"""
Command line entry point.

    python -m modgraph scan --tsconfig tsconfig.json --root . [--output report.json]
"""

import argparse
import json
import math
import os
import sys
from typing import Any, List, Optional

from .analysis import CohesionAnalyzer
from .config import ConfigurationError, ScannerOptions
from .scanner import RepositoryScanner


def _clean(value: Any) -> Any:
    """Make a report JSON-safe: non-finite floats become null."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: _clean(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_clean(v) for v in value]
    return value


def build_report(scanner: RepositoryScanner, root_dir: str, percentile: float = 0.25) -> dict:
    graph = scanner.scan_repository(root_dir)
    analyzer = CohesionAnalyzer(graph)
    analyzer.analyze()
    return _clean({
        "graph": graph.to_dict(),
        "cohesion": {
            "raw": analyzer.get_raw_scores(),
            "normalized": analyzer.get_normalized_scores()
        },
        "statistics": analyzer.get_statistics(percentile)
    })


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="modgraph",
        description="Dependency graph and cohesion metrics for TypeScript/React code",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", help="Scan a TypeScript repository")
    scan.add_argument("-t", "--tsconfig", required=True, help="Path to the tsconfig.json file")
    scan.add_argument("-r", "--root", required=True, help="Path to the root directory of the repository")
    scan.add_argument("-o", "--output", help="Path to the output file")
    scan.add_argument("--options", help="YAML file with scanner options")
    scan.add_argument("--percentile", type=float, default=0.25,
                      help="Percentile for the below-percentile report (default: 0.25)")
    scan.add_argument("--debug", action="store_true", help="Print diagnostics while scanning")
    return parser


def cmd_scan(args: argparse.Namespace) -> int:
    tsconfig_file = os.path.abspath(args.tsconfig)
    root_dir = os.path.abspath(args.root)

    try:
        options = ScannerOptions.from_yaml(args.options) if args.options else ScannerOptions()
        options.with_env_overrides()
        if args.debug:
            options.debug = True

        if not os.path.isdir(root_dir):
            raise ConfigurationError("Root directory not found.")

        scanner = RepositoryScanner(tsconfig_file, options)
        report = build_report(scanner, root_dir, args.percentile)
    except ConfigurationError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2

    text = json.dumps(report, indent=2)
    if args.output:
        with open(args.output, "w") as f:
            f.write(text)
        print(f"[SAVE] Report written to {args.output}")
    else:
        print(text)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = create_parser().parse_args(argv)
    if args.command == "scan":
        return cmd_scan(args)
    return 1


if __name__ == "__main__":
    sys.exit(main())
