"""
Stock Kernel

Typed record domain and shared infrastructure for the inventory engine:
- Strict, validated inventory records
- Derived stock status (never stored)
- Typed exceptions with machine-readable codes
- Structured JSON logging and an injectable clock
"""

__version__ = "0.1.0"
