#!/usr/bin/env python3
"""
MOM DPLL SAT Solver

A plain recursive backtracking (DPLL) SAT solver for formulas in conjunctive
normal form. Each search node runs one batched unit-propagation pass, and
branching literals are picked by the MOM heuristic: the literal with the
Most Occurrences in clauses of Minimal length.

Literals follow the DIMACS convention: variable n is written n, its negation -n.
"""

import argparse
import itertools
import logging
import os
import re
import sys
import time
from collections import Counter
from typing import Iterable, List, Optional


logger = logging.getLogger(__name__)

Literal = int
# A literal forced to evaluate to true.
Assignment = int
Clause = List[Literal]
# The satisfying assignments, or None when the formula is unsatisfiable.
SatResult = Optional[List[Assignment]]

_LITERAL = re.compile(r"[+-]?[0-9]+")


def init_logger(level="WARNING"):
    logging.basicConfig(format='%(levelname)s: %(message)s', level=os.environ.get("LOGLEVEL", level))


class DimacsParseError(ValueError):
    """Raised when a line of a DIMACS document cannot be read as a clause."""


class SearchStatistics:
    """Counters collected over one top-level search."""

    def __init__(self):
        self.node_counter = 0
        self.unit_propagation_counter = 0

    def __repr__(self):
        return (f"SearchStatistics(node_counter={self.node_counter}, "
                f"unit_propagation_counter={self.unit_propagation_counter})")


def _unique(clause: Iterable[Literal]) -> Clause:
    seen = set()
    result = []
    for lit in clause:
        if lit not in seen:
            seen.add(lit)
            result.append(lit)
    return result


class Formula:
    """
    A node of the search tree.

    Holds the assignments made on the way from the original problem to this
    node, and the clauses which are still undecided. Clauses containing an
    assigned literal are dropped, negations of assigned literals are stripped
    from the clauses that remain.
    """

    def __init__(self, clauses: Iterable[Iterable[Literal]],
                 assignments: Optional[List[Assignment]] = None):
        """
        Initialize a formula.

        Args:
            clauses: List of clauses, each a list of non-zero literals.
                     Repeated literals inside one clause are collapsed.
            assignments: Assignments already made, defaults to none. They are
                         applied with `assign`, in order.
        """
        self.clauses: List[Clause] = [_unique(clause) for clause in clauses]
        self.original_clauses: List[Clause] = [clause[:] for clause in self.clauses]
        self.assignments: List[Assignment] = []
        for literal in assignments or []:
            self.assign(literal)
        self.num_variables = self._compute_num_variables()

    def _compute_num_variables(self) -> int:
        variables = set()
        for clause in self.original_clauses:
            for lit in clause:
                variables.add(abs(lit))
        return len(variables)

    def copy(self) -> 'Formula':
        new = Formula.__new__(Formula)
        new.clauses = [clause[:] for clause in self.clauses]
        new.original_clauses = self.original_clauses
        new.assignments = self.assignments[:]
        new.num_variables = self.num_variables
        return new

    def with_true(self, literal: Literal) -> 'Formula':
        """Return a copy of this formula in which `literal` is assigned true."""
        new = self.copy()
        new.assign(literal)
        return new

    def assign(self, literal: Literal) -> None:
        """
        Assign `literal` true in place.

        Clauses containing the literal are satisfied and removed; the first
        occurrence of its negation is removed from every remaining clause.
        The literal must not be assigned already.
        """
        self.assignments.append(literal)
        self.clauses = [clause for clause in self.clauses if literal not in clause]

        inverse = -literal
        for clause in self.clauses:
            if inverse in clause:
                clause.remove(inverse)

    def unit_propagate(self, stats: SearchStatistics) -> List[Literal]:
        """
        Assign true to the literals of all unit clauses.

        Only the unit clauses present when the pass starts are used; unit
        clauses produced by these assignments are left for the next pass.

        Args:
            stats: Statistics whose propagation counter is increased by the
                   number of distinct forced literals.

        Returns:
            The forced literals, in the order they were assigned.
        """
        forced = sorted(set(clause[0] for clause in self.clauses if len(clause) == 1))

        stats.unit_propagation_counter += len(forced)
        for literal in forced:
            self.assign(literal)
        return forced

    def mom(self) -> Literal:
        """
        Find the literal occurring most often in the clauses of minimal length.

        The formula must have at least one clause and no empty clause.
        Ties go to the literal seen first.
        """
        min_len = min(len(clause) for clause in self.clauses)

        counts = Counter()
        for clause in self.clauses:
            if len(clause) == min_len:
                counts.update(clause)

        return max(counts, key=counts.get)

    def has_empty_clause(self) -> bool:
        return any(len(clause) == 0 for clause in self.clauses)

    def is_satisfied(self, assignments: Iterable[Assignment]) -> bool:
        """Check if every original clause contains one of the given assignments."""
        true_literals = set(assignments)
        for clause in self.original_clauses:
            if not any(lit in true_literals for lit in clause):
                return False
        return True

    def __eq__(self, other):
        if not isinstance(other, Formula):
            return NotImplemented
        return self.assignments == other.assignments and self.clauses == other.clauses

    def __repr__(self):
        return f"Formula(assignments={self.assignments!r}, clauses={self.clauses!r})"


def solve(stats: SearchStatistics, formula: Formula) -> SatResult:
    """
    Recursively search the tree of possible assignments.

    Steps:
    1. Count the node and prune with one unit propagation pass.
    2. No clauses left: return the assignments of this node.
    3. An empty clause left: this subtree is unsatisfiable.
    4. Pick a literal with the MOM heuristic and explore the subtree where it
       is true; only if that fails, the subtree where it is false.

    Args:
        stats: Counters shared by the whole search.
        formula: The node to explore. Consumed by the call.

    Returns:
        The list of true literals if SAT, None if UNSAT.
    """
    stats.node_counter += 1

    formula.unit_propagate(stats)

    if not formula.clauses:
        return formula.assignments
    if formula.has_empty_clause():
        return None

    literal = formula.mom()
    logger.debug("Branching on %d at depth %d", literal, len(formula.assignments))

    result = solve(stats, formula.with_true(literal))
    if result is not None:
        return result
    return solve(stats, formula.with_true(-literal))


class MOMSolver:
    """Runs the search on a formula and keeps the statistics of the last run."""

    def __init__(self, formula: Formula):
        self.formula = formula
        self.stats = SearchStatistics()

    def solve(self) -> SatResult:
        """
        Solve the SAT problem.

        The formula given to the constructor is left untouched.

        Returns:
            A satisfying list of true literals if SAT, None if UNSAT.
        """
        self.stats = SearchStatistics()

        # One frame per decision level, at most one level per variable.
        old_limit = sys.getrecursionlimit()
        needed = self.formula.num_variables + 1000
        if old_limit < needed:
            sys.setrecursionlimit(needed)
        try:
            result = solve(self.stats, self.formula.copy())
        finally:
            sys.setrecursionlimit(old_limit)

        if result is not None:
            if not self.formula.is_satisfied(result):
                raise RuntimeError("Invalid solution found!")

        return result


def solve_sat(clauses: List[List[int]]) -> SatResult:
    """
    Convenience function to solve a SAT problem.

    Args:
        clauses: List of clauses in CNF format

    Returns:
        Sorted satisfying assignment if SAT, None if UNSAT
    """
    result = MOMSolver(Formula(clauses)).solve()
    if result is None:
        return None
    return sorted(result)


def parse_dimacs(text: str) -> Formula:
    """
    Parse a CNF formula in DIMACS format.

    Leading comment lines are skipped, then the problem line is skipped by
    position without being checked. Every following line is one clause,
    read up to its terminating 0.

    Args:
        text: DIMACS format text

    Returns:
        Formula with no assignments

    Raises:
        DimacsParseError: a literal could not be parsed as an integer.
    """
    lines = itertools.dropwhile(lambda line: line.startswith('c'), text.splitlines())
    header = next(lines, None)
    logger.debug("[Parser] Problem line: %s", header)

    clauses = []
    for line in lines:
        tokens = list(itertools.takewhile(lambda token: token != '0', line.split()))
        if not all(_LITERAL.fullmatch(token) for token in tokens):
            raise DimacsParseError(f"Failed to parse line: {line}")
        clauses.append([int(token) for token in tokens])

    logger.debug("[Parser] Num clauses: %d", len(clauses))
    return Formula(clauses)


def read_dimacs_file(path) -> Formula:
    with open(path, "r", encoding="utf-8") as f:
        problem = f.read()
    return parse_dimacs(problem)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='DPLL SAT solver with the MOM branching heuristic')
    parser.add_argument('cnf_file', help='DIMACS CNF file')
    parser.add_argument('-q', '--quiet', action='store_true',
                        help='do not print the satisfying assignment')
    return parser


def main(argv=None) -> int:
    opts = build_parser().parse_args(argv)
    init_logger()

    start = time.process_time()
    try:
        formula = read_dimacs_file(opts.cnf_file)
    except (OSError, UnicodeDecodeError) as e:
        print(f"error: failed to read file: {e}", file=sys.stderr)
        return 1
    except DimacsParseError as e:
        print(f"error: failed to parse problem file: {e}", file=sys.stderr)
        return 1
    solver = MOMSolver(formula)
    time_init = time.process_time() - start

    start = time.process_time()
    result = solver.solve()
    if result is not None:
        print("SAT")
        if not opts.quiet:
            print(f"true: {sorted(result)}")
    else:
        print("UNSAT")
    time_solution = time.process_time() - start

    print()
    print(f"setup time:        {time_init:.6f} s")
    print(f"solve time:        {time_solution:.6f} s")
    print(f"unit propagations: {solver.stats.unit_propagation_counter}")
    print(f"nodes visited:     {solver.stats.node_counter}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
