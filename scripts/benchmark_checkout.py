#!/usr/bin/env python3
"""Benchmark order number generation and order pricing.

Usage:
    # Generate order numbers and report duplicates
    python scripts/benchmark_checkout.py --order-numbers --iterations 10000

    # Benchmark totals calculation
    python scripts/benchmark_checkout.py --totals --iterations 1000

Requirements:
    - Django settings configured (defaults to ultimata.settings.dev)
"""

import argparse
import os
import sys
import time
from decimal import Decimal
from statistics import mean, stdev

# Add src to path for Django imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

# Setup Django
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "ultimata.settings.dev")

import django
django.setup()


def benchmark_order_numbers(iterations: int) -> tuple[list[float], int]:
    """Generate order numbers back to back; returns timings and duplicate count."""
    from ultimata.orders.services import generate_order_number

    times = []
    seen = set()
    duplicates = 0

    for _ in range(iterations):
        start = time.perf_counter()
        number = generate_order_number()
        elapsed = time.perf_counter() - start
        times.append(elapsed * 1000)  # Convert to ms

        if number in seen:
            duplicates += 1
        seen.add(number)

    return times, duplicates


def benchmark_totals(iterations: int) -> list[float]:
    """Benchmark calculate_totals on a three-line discounted, taxed order."""
    from ultimata.orders.pricing import PricedLine, calculate_totals

    times = []
    lines = [
        PricedLine(product_id=1, unit_price=Decimal("4.99"), quantity=3),
        PricedLine(product_id=2, unit_price=Decimal("9.50"), quantity=1),
        PricedLine(product_id=3, unit_price=Decimal("2.00"), quantity=12),
    ]

    # Warm up
    for _ in range(10):
        calculate_totals(lines, Decimal("15"), {1, 3}, Decimal("0.12"))

    # Benchmark
    for _ in range(iterations):
        start = time.perf_counter()
        calculate_totals(lines, Decimal("15"), {1, 3}, Decimal("0.12"))
        elapsed = time.perf_counter() - start
        times.append(elapsed * 1000)  # Convert to ms

    return times


def print_stats(name: str, times: list[float]):
    """Print benchmark statistics."""
    if not times:
        print(f"{name}: No data")
        return

    ordered = sorted(times)
    print(f"\n{name}:")
    print(f"  Iterations: {len(times)}")
    print(f"  Mean:       {mean(times):.4f} ms")
    print(f"  Std Dev:    {stdev(times) if len(times) > 1 else 0:.4f} ms")
    print(f"  Min:        {ordered[0]:.4f} ms")
    print(f"  Max:        {ordered[-1]:.4f} ms")
    print(f"  P50:        {ordered[len(times) // 2]:.4f} ms")
    print(f"  P99:        {ordered[int(len(times) * 0.99)]:.4f} ms")


def main():
    parser = argparse.ArgumentParser(description="Benchmark checkout helpers")
    parser.add_argument("--order-numbers", action="store_true", help="Benchmark order number generation")
    parser.add_argument("--totals", action="store_true", help="Benchmark totals calculation")
    parser.add_argument("--iterations", type=int, default=10000, help="Number of iterations (default: 10000)")
    args = parser.parse_args()

    if not (args.order_numbers or args.totals):
        parser.print_help()
        return

    print("=" * 60)
    print("BENCHMARK RESULTS")
    print("=" * 60)

    if args.order_numbers:
        times, duplicates = benchmark_order_numbers(args.iterations)
        print_stats("generate_order_number", times)
        print(f"  Duplicates: {duplicates}")

    if args.totals:
        print_stats("calculate_totals", benchmark_totals(args.iterations))


if __name__ == "__main__":
    main()
