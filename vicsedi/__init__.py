"""vicsedi: VICS 4010/5010 X12 codec for retail 850/856/810 documents."""

__version__ = "0.1.0"
