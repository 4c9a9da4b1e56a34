"""
ShelfLink

Keeps reading-list and challenge entries linked to books in a user's library
by fuzzy-matching their free-text title and author.
"""

__version__ = "1.0.0"
