"""Estate marketplace server: wallet ledger, withdrawals and peer-to-peer property marketplace."""

__version__ = "0.1.0"
