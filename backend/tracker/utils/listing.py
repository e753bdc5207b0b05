from __future__ import annotations
from typing import List


def build_list_payload(rows: List[dict], limit: int):
    """List envelope shared by every collection endpoint (fixed cap, no offset)."""
    return {
        'data': rows,
        'meta': {
            'limit': limit,
            'returned': len(rows),
        }
    }

__all__ = ['build_list_payload']
