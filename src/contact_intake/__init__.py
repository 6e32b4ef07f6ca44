"""
Contact intake service: form submission and CSV import of contact records.
"""

__version__ = "0.1.0"
