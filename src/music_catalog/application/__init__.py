"""
Application Layer

Read-side queries built on the catalog repositories.
"""
