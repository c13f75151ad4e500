"""SObject metadata access and query generation."""
