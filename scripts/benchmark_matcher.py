"""
Micro-benchmark for the compatibility matcher.

Tests:
1. clean_model_label() on typical noisy inventory labels
2. build_reference_index() on a synthetic 2k-model catalog
3. analyze_inventory() end-to-end on a synthetic 5k-row inventory

Usage:
    python scripts/benchmark_matcher.py
"""

import logging
import time

import numpy as np

from compat_mapper import (
    ReferenceEntry,
    analyze_inventory,
    build_manufacturer_vocabulary,
    build_reference_index,
    clean_model_label,
    compute_match_summary,
)

MANUFACTURERS = ['Axis', 'Hanwha Vision', 'Hikvision', 'Bosch', 'Vivotek', 'Uniview', 'Dahua']
PREFIXES = ['P', 'Q', 'M', 'DS-2CD', 'XNV-', 'IPC', 'FD']
SUFFIXES = ['', '-E', '-LVE', '-I', '-IR', 'G0-I', '-Z']
NOTES = ['', '', '', 'RTSP support only', 'Requires firmware upgrade']


def generate_synthetic_catalog(n_rows: int = 2000, seed: int = 7):
    """Generate a synthetic compatibility catalog for benchmarking."""
    rng = np.random.default_rng(seed)
    catalog = []
    for i in range(n_rows):
        manufacturer = rng.choice(MANUFACTURERS)
        model = f"{rng.choice(PREFIXES)}{rng.integers(1000, 9999)}{rng.choice(SUFFIXES)}"
        catalog.append(ReferenceEntry(
            manufacturer=str(manufacturer),
            model_name=model,
            minimum_firmware=f"{rng.integers(5, 11)}.{rng.integers(0, 9)}",
            notes=str(rng.choice(NOTES)),
        ))
    return catalog


def generate_synthetic_inventory(catalog, n_rows: int = 5000, seed: int = 11):
    """
    Generate an inventory table whose model cells carry realistic noise:
    vendor names, IPs, MACs, dates, filler words and typos.
    """
    rng = np.random.default_rng(seed)
    headers = ['Name', 'Model', 'IP', 'Qty']
    rows = []
    for i in range(n_rows):
        entry = catalog[int(rng.integers(0, len(catalog)))]
        model = entry.model_name
        roll = rng.random()
        if roll < 0.2:
            model = model.replace('-', '')                       # dropped separator
        elif roll < 0.3:
            model = model[:-1]                                   # truncated
        elif roll < 0.35:
            model = f"UNKNOWN-{rng.integers(100, 999)}"          # not in catalog

        noise = []
        if rng.random() < 0.5:
            noise.append(entry.manufacturer)
        if rng.random() < 0.3:
            noise.append(f"10.{rng.integers(0, 255)}.{rng.integers(0, 255)}.{rng.integers(1, 254)}")
        if rng.random() < 0.2:
            noise.append("00:1A:2B:%02X:%02X:%02X" % tuple(rng.integers(0, 255, 3)))
        if rng.random() < 0.2:
            noise.append("2023-04-01")
        if rng.random() < 0.3:
            noise.append(str(rng.choice(['outdoor', 'dome', 'camera', 'bullet'])))

        label = ' '.join([model] + noise)
        rows.append([f"Cam {i}", label, '', str(rng.integers(1, 5))])
    return headers, rows


def benchmark_function(func, *args, **kwargs):
    """Benchmark a function and return (result, elapsed_ms)."""
    start = time.perf_counter()
    result = func(*args, **kwargs)
    end = time.perf_counter()
    elapsed_ms = (end - start) * 1000
    return result, elapsed_ms


def benchmark_clean_model_label(n_iterations: int = 10000):
    """Benchmark clean_model_label() on the hot path."""
    vocabulary = build_manufacturer_vocabulary(generate_synthetic_catalog(200))
    test_strings = [
        "Axis P3245-LVE 192.168.1.5 2023-04-01",
        "Hikvision DS-2CD2143G0-I outdoor dome camera",
        "XNV-6080R 00:1A:2B:3C:4D:5E Hanwha Vision",
        "Bosch FLEXIDOME IP 5000i installed Apr 3, 2021",
    ]

    print("\n" + "="*70)
    print("BENCHMARK: clean_model_label() - Hot Path")
    print("="*70)

    for test_str in test_strings:
        start = time.perf_counter()
        for _ in range(n_iterations):
            _ = clean_model_label(test_str, vocabulary)
        elapsed_ms = (time.perf_counter() - start) * 1000
        per_call_us = elapsed_ms * 1000 / n_iterations

        print(f"\nInput: {test_str}")
        print(f"  Cleaned: {clean_model_label(test_str, vocabulary).cleaned}")
        print(f"  Per call: {per_call_us:.2f}us")


def benchmark_analyze_inventory():
    """Benchmark index building and analyze_inventory() end-to-end."""
    print("\n" + "="*70)
    print("BENCHMARK: analyze_inventory() - 5k rows vs 2k catalog")
    print("="*70)

    catalog = generate_synthetic_catalog(2000)
    index, index_time = benchmark_function(build_reference_index, catalog)
    print(f"\n  Reference index: {index_time:.2f}ms ({len(index)} models)")

    headers, rows = generate_synthetic_inventory(catalog, 5000)
    results, match_time = benchmark_function(
        analyze_inventory, headers, rows, 'Model', count_column='Qty', index=index,
    )

    print(f"  Matching time: {match_time:.2f}ms")
    print(f"  Distinct models: {len(results)}")
    print(f"  Per-model time: {match_time / max(len(results), 1):.2f}ms")

    summary = compute_match_summary(results)
    print("\nMatch Results:")
    for match_type in ('exact', 'potential', 'none'):
        print(f"  {match_type}: {summary[f'{match_type}_models']} models, "
              f"{summary[f'{match_type}_devices']:.0f} devices ({summary[f'{match_type}_rate']}%)")


def main():
    """Run all benchmarks."""
    logging.basicConfig(level=logging.WARNING, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    print("="*70)
    print("COMPAT MAPPER PERFORMANCE BENCHMARK")
    print("="*70)

    benchmark_clean_model_label(10000)
    benchmark_analyze_inventory()

    print("\n" + "="*70)
    print("BENCHMARK COMPLETE")
    print("="*70)


if __name__ == '__main__':
    main()
