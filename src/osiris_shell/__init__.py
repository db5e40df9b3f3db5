"""
Osiris shell: a terminal desktop shell with an interactive session engine.
"""

__version__ = "0.1.0"
