"""Integrations with the account database."""
