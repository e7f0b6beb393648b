"""Parsers for analyzer output."""

from .results import AnalyzerResultsParser, read_analysis_file

__all__ = ["AnalyzerResultsParser", "read_analysis_file"]
