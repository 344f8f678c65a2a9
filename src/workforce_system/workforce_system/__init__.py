"""Workforce System package.

Feature modules (rotations, assignments, coverage, ...) keep the scheduling
rules in pure functions and services, with a thin Flask controller layer and
repository protocols in front of MySQL.
"""
