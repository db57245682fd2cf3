"""Domain layer — pure models and rules, no I/O.

Must never import from infrastructure, services, commands, or output.
"""
