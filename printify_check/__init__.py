# printify_check/__init__.py
"""
printify-check: client core for the Printify Check document workflow.

Upload, validate, OCR, redact and fix PDFs through the Processing API.
"""

__version__ = "0.1.0"
