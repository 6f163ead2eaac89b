"""
Infrastructure Layer

Implementations of the repository interfaces and the file formats the
catalog is stored in.
"""
