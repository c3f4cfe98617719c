"""Terminal airline booking system: planes, flights, seats and passengers kept in text files."""

__version__ = "0.1.0"