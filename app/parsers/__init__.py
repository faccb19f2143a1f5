"""
app/parsers package marker.
"""

from app.parsers.file_parser import FileFormat, FileParser, parse_file, resolve_file_format

__all__ = ["FileFormat", "FileParser", "parse_file", "resolve_file_format"]
