"""
Query result encoding
Streams a results cursor into a JSON array of {"Key", "Record"} objects
"""

import json

from ..consent.storage import ResultsIterator


def encode_query_results(results: ResultsIterator) -> bytes:
    """Encode every remaining result of the cursor, in cursor order.

    Record values are embedded as-is; they are expected to already be JSON.
    The cursor is advanced but not closed.
    """
    buffer = bytearray(b"[")

    member_written = False
    while results.has_next():
        result = results.next()
        # Separator before every member except the first
        if member_written:
            buffer += b","
        buffer += b'{"Key":'
        buffer += json.dumps(result.key).encode("utf-8")
        buffer += b',"Record":'
        buffer += result.value if result.value else b"null"
        buffer += b"}"
        member_written = True

    buffer += b"]"
    return bytes(buffer)
