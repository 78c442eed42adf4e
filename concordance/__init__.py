"""
Concordance DAT Toolkit

Streaming reader and writer for Concordance DAT load files.

Modules:
    models  - Data models (DatFileOptions, EmptyField, DatRecord)
    common  - Shared utilities (format constants, config loader, logging)
    dat     - Encoding detection, tokenizer, reader, writer and splitter
    cli     - Command-line entry point (concordance-dat)
"""

__version__ = "0.1.0"
