"""Input of vote counts from files.

This subpackage is structured into modules by file format. The
:mod:`io.count` module reads a vote count snapshot from a JSON document.
"""
