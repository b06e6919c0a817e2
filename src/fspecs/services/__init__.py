from .safe_copy import backup, backup_path, safe_copy, safe_write
from .type_detector import detect_type, match_signature
from .walker import Walker, walk

__all__ = [
    "Walker",
    "backup",
    "backup_path",
    "detect_type",
    "match_signature",
    "safe_copy",
    "safe_write",
    "walk",
]
