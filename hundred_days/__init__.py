"""100 Days Challenge & Blog API."""
