"""Guard relaxation and symbolic membership queries."""
