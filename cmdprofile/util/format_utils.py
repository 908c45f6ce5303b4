"""Human-readable formatting helpers for the run log."""

_BINARY_UNITS = ["B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB"]


def ibytes(num_bytes: int) -> str:
    """
    Format a byte count with binary (1024-based) units.

    Values below 10 units keep one decimal place, larger values are rounded:
    ibytes(82854982) -> '79 MiB', ibytes(1288490188) -> '1.2 GiB'.
    """
    if num_bytes < 1024:
        return f"{num_bytes} B"

    value = float(num_bytes)
    unit = _BINARY_UNITS[0]
    for unit in _BINARY_UNITS[1:]:
        value /= 1024
        if value < 1024:
            break

    if value < 10:
        return f"{value:.1f} {unit}"
    return f"{value:.0f} {unit}"


def format_percent(value: float) -> str:
    return f"{value:.2f}%"
