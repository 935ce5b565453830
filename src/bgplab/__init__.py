"""IPv4 subnetting and BGP policy validation engine for a teaching simulator."""

__version__ = "0.1.0"
