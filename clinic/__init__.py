"""
Virtual Clinic
==============
Record & scheduling core for a small clinic: patient records, appointment
booking, diagnosis and disease-case bookkeeping, backed by flat text files.
"""

__version__ = "1.0.0"
