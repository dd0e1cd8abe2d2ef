"""Live UK rail departure and arrival boards in the terminal."""

__version__ = "2.2.0"
