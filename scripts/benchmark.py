#!/usr/bin/env python3
"""Benchmark script for dicheck performance testing.

Outputs results in JSON format compatible with github-action-benchmark.
"""

from __future__ import annotations

import argparse
import json
import time
from pathlib import Path
from typing import Any


def synthetic_document(services: int) -> dict[str, Any]:
    """Fact document with a chain of services, each depending on the next.

    Every tenth service is scoped under a singleton consumer, so the
    captive analyzer has work to report.
    """
    registrations = []
    shapes = []
    for i in range(services):
        lifetime = "scoped" if i % 10 == 0 else "singleton"
        registrations.append(
            {
                "service": f"IService{i}",
                "implementation": {"type": f"Service{i}"},
                "lifetime": lifetime,
                "location": f"Startup.cs:{i + 1}:8",
            }
        )
        dependencies = [f"IService{i + 1}"] if i + 1 < services else []
        shapes.append({"type": f"Service{i}", "capabilities": [f"IService{i}"], "dependencies": dependencies})

    traces = [
        {
            "name": f"Handler{i}",
            "async": True,
            "events": [
                {"kind": "create", "handle": "scope", "async": True, "guarded": True},
                {"kind": "resolve", "handle": "scope", "result": "svc", "service": f"IService{i}"},
                {"kind": "use", "value": "svc"},
                {"kind": "dispose", "handle": "scope"},
            ],
        }
        for i in range(0, services, 5)
    ]
    return {"registrations": registrations, "shapes": shapes, "traces": traces}


def benchmark_import_time() -> float:
    """Measure import time of dicheck package."""
    start = time.perf_counter()
    import dicheck  # noqa: F401

    return time.perf_counter() - start


def benchmark_fact_loading(document: dict[str, Any]) -> float:
    """Measure FactSet construction from a decoded document."""
    from dicheck.infrastructure.fact_loader import load_facts

    start = time.perf_counter()
    load_facts(document)
    return time.perf_counter() - start


def benchmark_check(document: dict[str, Any]) -> float:
    """Measure one full engine run."""
    from dicheck.application.services import DICheckEngine
    from dicheck.infrastructure.fact_loader import load_facts

    facts = load_facts(document)
    engine = DICheckEngine.with_defaults()

    start = time.perf_counter()
    engine.check(facts)
    return time.perf_counter() - start


def main() -> None:
    """Run benchmarks and output results."""
    parser = argparse.ArgumentParser(description="Run dicheck benchmarks")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("benchmark-results.json"),
        help="Output file for benchmark results",
    )
    parser.add_argument(
        "--services",
        type=int,
        default=2000,
        help="Number of synthetic services",
    )
    args = parser.parse_args()

    document = synthetic_document(args.services)
    results = []

    # Import time
    import_time = benchmark_import_time()
    results.append(
        {
            "name": "Import Time",
            "unit": "seconds",
            "value": import_time,
        }
    )

    # Fact loading
    load_time = benchmark_fact_loading(document)
    results.append(
        {
            "name": f"Fact Loading ({args.services} services)",
            "unit": "seconds",
            "value": load_time,
        }
    )

    # Full check
    check_time = benchmark_check(document)
    results.append(
        {
            "name": f"Check ({args.services} services)",
            "unit": "seconds",
            "value": check_time,
        }
    )

    # Write results
    args.output.write_text(json.dumps(results, indent=2))
    print(f"Benchmark results written to {args.output}")
    for r in results:
        print(f"  {r['name']}: {r['value']:.4f} {r['unit']}")


if __name__ == "__main__":
    main()
