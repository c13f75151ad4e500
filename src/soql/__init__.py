"""SOQL generation from a field selection and a resolved filter."""
