"""Domain modules: accounts, membership, properties, wallets, withdrawals, marketplace."""
