"""
Data comparison between Db2 for z/OS and IBM Db2 Analytics Accelerator

This package validates that the copy of a table held on an accelerator
(IBM Db2 Analytics Accelerator / Data Gate) is consistent with the table in
Db2 for z/OS, which is the source of truth.

Components:
- compare: ordering key derivation, row sources and the streaming diff engine
- report: difference accumulation and rendering
- db: Db2 connections and catalog access
- cli: command-line entry point

Usage:
    from acceldiff.compare import DiffEngine, SequenceRowSource

    engine = DiffEngine()
    report = engine.compare(left_source, right_source, budget=100)
    print(report.render())
"""

__version__ = "1.0.0"
__all__ = ["compare", "report", "db", "cli"]
