"""
Client for the reservation-acceptance settings of a restaurant chain's
branches, sections and tables.
"""
__version__ = "0.1.0"
