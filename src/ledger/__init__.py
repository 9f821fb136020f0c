"""Account ledger service: per-user balances mutated through action types."""
