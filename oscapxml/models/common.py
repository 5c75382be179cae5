"""
Shared model types.
"""

from enum import Enum


class ContentFormat(str, Enum):
    """
    Document formats oscapxml can map.

    The format determines which registered parser handles a document.

    Attributes:
        SCAP_DATASTREAM: SCAP 1.2/1.3 source data stream collection
        XCCDF: Standalone XCCDF 1.2 benchmark
    """

    SCAP_DATASTREAM = "scap_datastream"
    XCCDF = "xccdf"
