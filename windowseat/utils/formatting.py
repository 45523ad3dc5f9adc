# windowseat/utils/formatting.py
import math

BYTE_UNITS = ['Bytes', 'KB', 'MB', 'GB']


def format_bytes(num_bytes: int, decimals: int = 1) -> str:
    """Human-readable size, e.g. 1536 -> '1.5 KB'."""
    if num_bytes <= 0:
        return '0 Bytes'
    i = min(int(math.floor(math.log(num_bytes) / math.log(1024))), len(BYTE_UNITS) - 1)
    value = round(num_bytes / (1024 ** i), decimals)
    return f"{value:g} {BYTE_UNITS[i]}"
