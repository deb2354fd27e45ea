"""Quality domain: audits, CAR / observation resolution and composite score."""
