"""Infrastructure layer — filesystem discovery, corpus loading, graph engine.

May import from domain. Must never import from services, commands, or output.
"""
