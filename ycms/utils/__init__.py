from .file_size import parse_file_size

__all__ = ["parse_file_size"]
