"""Transaction export module."""
from .encoder import to_csv, to_json, from_json, export_filename, write_export

__all__ = ["to_csv", "to_json", "from_json", "export_filename", "write_export"]
