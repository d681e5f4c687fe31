"""Human-readable byte counts (1024-based)."""

KB = 1024
MB = KB * 1024
GB = MB * 1024


def format_size(num_bytes: int) -> str:
    """
    Format a byte count as ``<n> B``, ``<x.xx> KB``, ``<x.xx> MB`` or ``<x.xx> GB``.

    Two decimals use Python's fixed-point formatting, i.e. round-half-even of
    the exact binary value, so 1048575 bytes renders as ``1024.00 KB``.
    Negative or missing counts are treated as zero.
    """
    n = int(num_bytes or 0)
    if n < 0:
        n = 0

    if n >= GB:
        return f"{n / GB:.2f} GB"
    if n >= MB:
        return f"{n / MB:.2f} MB"
    if n >= KB:
        return f"{n / KB:.2f} KB"
    return f"{n} B"
