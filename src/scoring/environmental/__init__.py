"""Environmental domain: estimated resource burden, sustainability and standards."""
