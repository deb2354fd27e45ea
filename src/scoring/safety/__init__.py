"""Health & safety domain: incident rates, safety score and risk ranking."""
