"""
DNS Record Decoder

Decodes DNS resource records from wire format into typed values.
"""

__version__ = "0.1.0"
