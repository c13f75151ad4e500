"""Temporal filter parsing, validation and resolution.

The filter layer turns the four raw SObject filter properties into either an interval filter or a
range filter anchored at the run start time, which the SOQL builder then renders.
"""
