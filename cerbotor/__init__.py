"""Certify model checking witnesses for BTOR2 circuits by writing check circuits."""

__version__ = "1.0.4"