"""Shared type aliases used across felosy."""

from decimal import Decimal
from typing import Any

# Config value types
ConfigDict = dict[str, Any]

# Anything accepted where a money or ratio amount is expected
Numeric = Decimal | int | float | str
