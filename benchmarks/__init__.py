"""Performance benchmarks for lptableau.

This package contains microbenchmarks for hot paths in the library, mainly
pivoting on dense versus sparse tableaux.
"""
