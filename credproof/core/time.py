"""
credproof/core/time.py

THE ONLY TIMESTAMP FUNCTION IN CREDPROOF.

Wire format: YYYY-MM-DDTHH:MM:SS.mmmZ
             (ISO-8601, milliseconds, explicit Z, no +00:00)

Claim creation and verification reports import claim_timestamp() from here.
"""

from datetime import datetime, timezone


def claim_timestamp() -> str:
    """
    Return current UTC time in ISO-8601 wire format.
    Format: YYYY-MM-DDTHH:MM:SS.mmmZ  (exactly 3 fractional digits, Z suffix)
    """
    now = datetime.now(timezone.utc)
    ms  = now.microsecond // 1000
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ms:03d}Z"
