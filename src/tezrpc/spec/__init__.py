"""Data models and JSON schemas for payloads returned by a Tezos node."""
