"""Resource operations against the document store."""
