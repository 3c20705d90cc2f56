"""Configuration, logging, identity and session reconciliation."""
