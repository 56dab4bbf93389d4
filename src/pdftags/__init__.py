"""
PDF Action Tags Package

Post-processes form metadata and record data for a PDF rendering pass.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - PDF rendering or page layout
    - Metadata retrieval from the host platform
    - Record storage

This package decides WHICH fields are rendered and HOW their
labels, notes and enumerated values are presented.

The host fetches metadata and data, calls the filter, then renders.
"""

__version__ = "0.1.0"
