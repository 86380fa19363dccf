"""
Lead sources: where the dialer gets phone numbers from.
"""

from powerdialer.leads.csv_loader import CsvLeadSource, SkippedRow
from powerdialer.leads.source import InMemoryLeadSource, LeadSource

__all__ = ["CsvLeadSource", "InMemoryLeadSource", "LeadSource", "SkippedRow"]
