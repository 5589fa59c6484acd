from __future__ import annotations
import json
from dataclasses import asdict, is_dataclass
from typing import Any, Dict
from core.util import ensure_parent

def _encode(obj: Any) -> Any:
    """Serialize readings and deltas that json cannot handle natively."""
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if is_dataclass(obj) and not isinstance(obj, type):
        return asdict(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")

class JsonSink:
    """
    JSON output sink for writing agent records in NDJSON format.
    
    Appends each record as a separate JSON object line to the specified file.
    Creates parent directories if they don't exist. Readings and deltas
    inside a record are written through their to_dict().
    """
    
    def __init__(self, path: str) -> None:
        """
        Initialize JSON sink with output file path.
        
        Args:
            path: File path for JSON output
        """
        self.path = path
        ensure_parent(self.path)

    def write(self, obj: Dict[str, Any]) -> None:
        """
        Write a single record as JSON line to the output file.
        
        Args:
            obj: Record to serialize and write
        """
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(json.dumps(obj, default=_encode) + "\n")
