"""Recipe catalog: JSON dump import pipeline and SQLite-backed recipe store."""

__version__ = "1.0.0"
