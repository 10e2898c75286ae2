#!/usr/bin/env python3
"""
Tests for the benchmark runner
"""

import contextlib
import csv
import io
import os
import tempfile
import unittest

from bench import BenchRecord, get_files, main, run_file, summarize


SAT_CNF = "c satisfiable\np cnf 3 3\n1 2 0\n-1 3 0\n-2 -3 0\n"
UNSAT_CNF = "c unsatisfiable\np cnf 2 4\n1 2 0\n-1 2 0\n1 -2 0\n-1 -2 0\n"


class BenchTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.data_dir = self.tmp.name

    def tearDown(self):
        self.tmp.cleanup()

    def _write(self, name, text, data_dir=None):
        path = os.path.join(data_dir or self.data_dir, name)
        with open(path, "w") as f:
            f.write(text)
        return path

    def _run(self, argv):
        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = main(argv)
        return code, out.getvalue(), err.getvalue()


class TestGetFiles(BenchTestCase):

    def test_only_cnf_sorted(self):
        self._write("b.cnf", UNSAT_CNF)
        self._write("a.cnf", SAT_CNF)
        self._write("notes.txt", "not a problem")
        files = get_files(self.data_dir)
        self.assertEqual([os.path.basename(f) for f in files], ["a.cnf", "b.cnf"])

    def test_sample_size(self):
        self._write("b.cnf", UNSAT_CNF)
        self._write("a.cnf", SAT_CNF)
        files = get_files(self.data_dir, sample_size=1)
        self.assertEqual([os.path.basename(f) for f in files], ["a.cnf"])


class TestRunFile(BenchTestCase):

    def test_sat_file(self):
        path = self._write("a.cnf", SAT_CNF)
        record = run_file(path, repeat=3)
        self.assertEqual(record.path, path)
        self.assertEqual(record.verdict, "sat")
        self.assertEqual(len(record.times), 3)
        self.assertGreater(record.node_counter, 0)

    def test_unsat_file(self):
        record = run_file(self._write("b.cnf", UNSAT_CNF))
        self.assertEqual(record.verdict, "unsat")
        self.assertEqual(len(record.times), 1)

    def test_invalid_repeat(self):
        path = self._write("a.cnf", SAT_CNF)
        with self.assertRaises(ValueError):
            run_file(path, repeat=0)


class TestSummarize(unittest.TestCase):

    def test_summary(self):
        records = [
            BenchRecord("a.cnf", "sat", [0.5, 1.5], 3, 4),
            BenchRecord("b.cnf", "unsat", [1.0], 5, 6),
        ]
        summary = summarize(records)
        self.assertEqual(summary['files'], 2)
        self.assertEqual(summary['sat'], 1)
        self.assertEqual(summary['unsat'], 1)
        self.assertEqual(summary['nodes'], 8)
        self.assertEqual(summary['unit_propagations'], 10)
        self.assertAlmostEqual(summary['mean'], 1.0)
        self.assertAlmostEqual(summary['min'], 0.5)
        self.assertAlmostEqual(summary['max'], 1.5)
        self.assertAlmostEqual(summary['std'], (1.0 / 6) ** 0.5)

    def test_empty(self):
        summary = summarize([])
        self.assertEqual(summary['files'], 0)
        self.assertEqual(summary['mean'], 0.0)
        self.assertEqual(summary['max'], 0.0)


class TestBenchCommandLine(BenchTestCase):

    def test_all_expected(self):
        self._write("a.cnf", SAT_CNF)
        code, out, _ = self._run([self.data_dir, "--expect", "sat", "--repeat", "2"])
        self.assertEqual(code, 0)
        self.assertIn("files:             1 (1 SAT, 0 UNSAT)", out)
        self.assertIn("mean solve time:", out)

    def test_unexpected_verdict(self):
        self._write("a.cnf", SAT_CNF)
        self._write("b.cnf", UNSAT_CNF)
        code, out, _ = self._run([self.data_dir, "--expect", "sat"])
        self.assertEqual(code, 1)
        self.assertIn("b.cnf: expected SAT, got UNSAT", out)

    def test_csv(self):
        self._write("a.cnf", SAT_CNF)
        self._write("b.cnf", UNSAT_CNF)
        with tempfile.TemporaryDirectory() as out_dir:
            csv_path = os.path.join(out_dir, "bench.csv")
            code, _, _ = self._run([self.data_dir, "--csv", csv_path])
            with open(csv_path, newline='') as f:
                rows = list(csv.reader(f))
        self.assertEqual(code, 0)
        self.assertEqual(rows[0], ['file', 'verdict', 'mean_time', 'nodes', 'unit_propagations'])
        self.assertEqual([row[1] for row in rows[1:]], ['sat', 'unsat'])

    def test_empty_directory(self):
        code, _, err = self._run([self.data_dir])
        self.assertEqual(code, 1)
        self.assertIn("no .cnf files", err)

    def test_undecodable_file(self):
        with open(os.path.join(self.data_dir, "binary.cnf"), "wb") as f:
            f.write(b"p cnf 1 1\n1 \xff 0\n")
        code, _, err = self._run([self.data_dir])
        self.assertEqual(code, 1)
        self.assertIn("failed to read file", err)
        self.assertIn("binary.cnf", err)

    def test_malformed_file(self):
        self._write("bad.cnf", "p cnf 1 1\nz 0\n")
        code, _, err = self._run([self.data_dir])
        self.assertEqual(code, 1)
        self.assertIn("Failed to parse line: z 0", err)


if __name__ == '__main__':
    unittest.main()
