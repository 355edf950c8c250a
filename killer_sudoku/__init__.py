"""
Killer Sudoku solver: exact cover via dancing links, plus integer
programming.
"""
