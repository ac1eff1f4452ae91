"""Boarding document verification policy and audit ledger."""

POLICY_VERSION = "1.0.0"
