#!/usr/bin/env python3
"""
Benchmark the MOM DPLL solver over a directory of DIMACS files.

Every `*.cnf` file in the directory is solved `--repeat` times; the solve
times of all runs are summarised by their mean, standard deviation, minimum
and maximum, together with the search statistics.
"""

import argparse
import csv
import glob
import logging
import os
import sys
import time
from collections import namedtuple

import numpy as np
from tqdm import tqdm

from mom_dpll import DimacsParseError, MOMSolver, init_logger, read_dimacs_file


logger = logging.getLogger(__name__)

BenchRecord = namedtuple(
    'BenchRecord', ['path', 'verdict', 'times', 'node_counter', 'unit_propagation_counter'])


def get_files(data_dir, sample_size=None):
    files = list(sorted(glob.glob(os.path.join(data_dir, '*.cnf'))))
    if sample_size is not None and len(files) > sample_size:
        files = files[:sample_size]
    return files


def timeit(f, *args, **kwargs):
    start_time = time.process_time()
    result = f(*args, **kwargs)
    end_time = time.process_time()
    return result, end_time - start_time


def run_file(path, repeat=1):
    """
    Solve one DIMACS file `repeat` times.

    The file is parsed once; each run starts from fresh statistics. The
    counters of the last run are kept (they are the same for every run).
    """
    if repeat < 1:
        raise ValueError(f"repeat must be positive, got {repeat}")

    solver = MOMSolver(read_dimacs_file(path))
    times = []
    result = None
    for _ in range(repeat):
        result, elapsed = timeit(solver.solve)
        times.append(elapsed)

    verdict = 'sat' if result is not None else 'unsat'
    logger.info("%s: %s in %.6f s", os.path.basename(path), verdict.upper(), times[-1])
    return BenchRecord(path, verdict, times,
                       solver.stats.node_counter, solver.stats.unit_propagation_counter)


def summarize(records):
    """Aggregate benchmark records into a dict of summary statistics."""
    summary = {
        'files': len(records),
        'sat': sum(1 for r in records if r.verdict == 'sat'),
        'unsat': sum(1 for r in records if r.verdict == 'unsat'),
        'nodes': sum(r.node_counter for r in records),
        'unit_propagations': sum(r.unit_propagation_counter for r in records),
    }

    times = np.array([t for r in records for t in r.times], dtype=np.float64)
    if times.size == 0:
        summary.update(mean=0.0, std=0.0, min=0.0, max=0.0)
    else:
        summary.update(mean=float(np.mean(times)), std=float(np.std(times)),
                       min=float(np.min(times)), max=float(np.max(times)))
    return summary


def write_csv(records, csv_path):
    with open(csv_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['file', 'verdict', 'mean_time', 'nodes', 'unit_propagations'])
        for r in records:
            writer.writerow([r.path, r.verdict, float(np.mean(r.times)),
                             r.node_counter, r.unit_propagation_counter])


def build_parser():
    parser = argparse.ArgumentParser(description='Benchmark the MOM DPLL solver on a directory of CNF files')
    parser.add_argument('data_dir', help='directory containing *.cnf files')
    parser.add_argument('--sample-size', type=int, default=None,
                        help='only use the first N files (sorted by name)')
    parser.add_argument('--repeat', type=int, default=1,
                        help='number of solver runs per file')
    parser.add_argument('--expect', choices=['sat', 'unsat'], default=None,
                        help='verdict every file is expected to have')
    parser.add_argument('--csv', default=None, help='write per-file results to this CSV file')
    return parser


def main(argv=None):
    opts = build_parser().parse_args(argv)
    init_logger()

    if opts.repeat < 1:
        print("error: --repeat must be positive", file=sys.stderr)
        return 1

    files = get_files(opts.data_dir, opts.sample_size)
    if not files:
        print(f"error: no .cnf files found in {opts.data_dir}", file=sys.stderr)
        return 1

    records = []
    for cnf_filepath in tqdm(files, desc="Solving", dynamic_ncols=True):
        try:
            records.append(run_file(cnf_filepath, opts.repeat))
        except (OSError, UnicodeDecodeError) as e:
            print(f"error: failed to read file {cnf_filepath}: {e}", file=sys.stderr)
            return 1
        except DimacsParseError as e:
            print(f"error: {cnf_filepath}: {e}", file=sys.stderr)
            return 1

    if opts.csv is not None:
        write_csv(records, opts.csv)

    summary = summarize(records)
    print(f"files:             {summary['files']} ({summary['sat']} SAT, {summary['unsat']} UNSAT)")
    print(f"mean solve time:   {summary['mean']:.6f} s")
    print(f"stddev:            {summary['std']:.6f} s")
    print(f"min:               {summary['min']:.6f} s")
    print(f"max:               {summary['max']:.6f} s")
    print(f"unit propagations: {summary['unit_propagations']}")
    print(f"nodes visited:     {summary['nodes']}")

    if opts.expect is not None:
        wrong = [r for r in records if r.verdict != opts.expect]
        for r in wrong:
            print(f" ! {r.path}: expected {opts.expect.upper()}, got {r.verdict.upper()}")
        if wrong:
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
