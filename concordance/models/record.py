"""
Record model.

A materialized DAT row: header name -> value, with case-insensitive keys.
"""

from requests.structures import CaseInsensitiveDict


class DatRecord(CaseInsensitiveDict):
    """
    Ordered, case-insensitive mapping for one data row.

    Keys keep header order. Assigning a key that differs only in case
    replaces the earlier value, so duplicate header names resolve to the
    last column.

    Usage:
        record = DatRecord()
        record["BEGDOC"] = "ABC0001"
        record["begdoc"]  # 'ABC0001'
    """

    def __repr__(self):
        return f"DatRecord({dict(self.items())!r})"
