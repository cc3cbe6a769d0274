"""csreport: customer-visit report submission and lookup."""
