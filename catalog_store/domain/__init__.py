"""Domain layer: the repository contract and the error taxonomy.

No persistence machinery is imported here.
"""
