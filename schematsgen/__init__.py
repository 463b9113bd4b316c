"""schematsgen — static type declarations generated from document-ORM schemas."""

__version__ = "0.1.0"
