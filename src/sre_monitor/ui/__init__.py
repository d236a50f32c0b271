"""User interface layer (command line)."""
