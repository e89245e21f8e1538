"""
CLI runner module.

Provides commands:
- init: Write a default config file
- upload: Upload a document and wait for processing
- get/list/search: Inspect documents
- extractions: Print extracted values
- delete: Remove a document
"""

from .main import create_cli, main

__all__ = [
    "create_cli",
    "main",
]
