__version__ = "2025.6.1"
