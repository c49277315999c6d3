"""Map and OBJ model asset tools, plus gyro and network-status helpers, for a handheld shooter."""

__version__ = "0.1.0"
__all__ = ["gyro", "mapasm", "netstatus", "objconvert"]