"""Tabular import pipeline for the ledger application.

Parses CSV / XLS / XLSX exports, proposes column mappings, transforms and
validates rows, and commits them one at a time to the datastore.
"""

__version__ = "0.1.0"
