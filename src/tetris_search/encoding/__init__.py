"""Lookup-key encoding of search calls."""

from tetris_search.encoding.encoder import (
    get_lock_value_lookup_encoded,
    encode_piece,
    encode_context,
    encode_weights,
)

__all__ = [
    "get_lock_value_lookup_encoded",
    "encode_piece",
    "encode_context",
    "encode_weights",
]
