"""Request and document schemas."""
