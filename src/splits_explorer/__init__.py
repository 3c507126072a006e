"""Situational split statistics: derivation, aggregation, tiering and export."""
