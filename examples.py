#!/usr/bin/env python3
"""
Examples for the MOM DPLL SAT Solver
"""

from mom_dpll import Formula, MOMSolver, SearchStatistics, parse_dimacs, solve, solve_sat


def example_3_coloring():
    """
    Graph 3-coloring problem.

    Given a graph, can we color each vertex with one of 3 colors
    such that no two adjacent vertices have the same color?

    Graph: Triangle (3 vertices, all connected)
    This is satisfiable.
    """
    print("\n" + "="*60)
    print("Example: Graph 3-Coloring (Triangle)")
    print("="*60)

    # Vertex v has color c: variable (v - 1) * 3 + c
    edges = [(1, 2), (1, 3), (2, 3)]
    clauses = []

    for vertex in range(1, 4):
        base = (vertex - 1) * 3
        # At least one color
        clauses.append([base + 1, base + 2, base + 3])
        # At most one color
        for c1 in range(1, 4):
            for c2 in range(c1 + 1, 4):
                clauses.append([-(base + c1), -(base + c2)])

    # Adjacent vertices have different colors
    for v1, v2 in edges:
        for color in range(1, 4):
            clauses.append([-((v1 - 1) * 3 + color), -((v2 - 1) * 3 + color)])

    result = solve_sat(clauses)

    if result is not None:
        print("SAT - 3-coloring exists!")
        print("\nColoring:")
        for vertex in range(1, 4):
            for color in range(1, 4):
                if (vertex - 1) * 3 + color in result:
                    print(f"  Vertex {vertex}: Color {color}")
    else:
        print("UNSAT - No 3-coloring exists")


def example_search_statistics():
    """
    Show the work done by unit propagation and branching.
    """
    print("\n" + "="*60)
    print("Example: Search Statistics")
    print("="*60)

    # (x1) ∧ (¬x1 ∨ x2) ∧ (x2 ∨ x3) ∧ (¬x2 ∨ ¬x3 ∨ x4) ∧ (x3 ∨ ¬x4)
    clauses = [
        [1],
        [-1, 2],
        [2, 3],
        [-2, -3, 4],
        [3, -4],
    ]

    formula = Formula(clauses)
    print(f"\nMOM picks literal {formula.mom()} at the root")

    stats = SearchStatistics()
    result = solve(stats, formula)

    if result is not None:
        print(f"SAT - Assignments in order: {result}")
    else:
        print("UNSAT")
    print(f"  nodes visited:     {stats.node_counter}")
    print(f"  unit propagations: {stats.unit_propagation_counter}")


def example_dimacs_format():
    """
    Example using DIMACS format.
    """
    print("\n" + "="*60)
    print("Example: DIMACS Format")
    print("="*60)

    dimacs = (
        "c Example CNF formula in DIMACS format\n"
        "c (x1 ∨ ¬x2) ∧ (x2 ∨ x3) ∧ (¬x1 ∨ ¬x3)\n"
        "p cnf 3 3\n"
        "1 -2 0\n"
        "2 3 0\n"
        "-1 -3 0\n"
    )

    print("\nDIMACS input:")
    print(dimacs)

    solver = MOMSolver(parse_dimacs(dimacs))
    result = solver.solve()

    if result is not None:
        print(f"SAT - Solution: {sorted(result)}")
    else:
        print("UNSAT")
    print(f"  {solver.stats}")


def example_pigeonhole():
    """
    Pigeonhole principle: n+1 pigeons in n holes.
    This is a classic UNSAT problem.
    """
    print("\n" + "="*60)
    print("Example: Pigeonhole Principle (4 pigeons, 3 holes)")
    print("="*60)

    n_pigeons = 4
    n_holes = 3

    clauses = []

    # Each pigeon must be in at least one hole
    for pigeon in range(n_pigeons):
        clause = []
        for hole in range(n_holes):
            var = pigeon * n_holes + hole + 1
            clause.append(var)
        clauses.append(clause)

    # At most one pigeon per hole
    for hole in range(n_holes):
        for p1 in range(n_pigeons):
            for p2 in range(p1 + 1, n_pigeons):
                var1 = p1 * n_holes + hole + 1
                var2 = p2 * n_holes + hole + 1
                clauses.append([-var1, -var2])

    print(f"\n{len(clauses)} clauses generated")

    solver = MOMSolver(Formula(clauses))
    result = solver.solve()

    if result is not None:
        print("SAT - Assignment found (unexpected!)")
    else:
        print("UNSAT - Cannot fit 4 pigeons in 3 holes (as expected)")
    print(f"  nodes visited: {solver.stats.node_counter}")


if __name__ == "__main__":
    print("\nMOM DPLL SAT Solver - Examples")
    print("="*60)

    example_search_statistics()
    example_3_coloring()
    example_dimacs_format()
    example_pigeonhole()

    print("\n" + "="*60)
    print("All examples completed!")
    print("="*60)
