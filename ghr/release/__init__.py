"""Release reconciliation and asset publishing."""
