"""
Database models for ShelfLink.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Index
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def _new_id() -> str:
    return str(uuid4())


class User(Base):
    """Library owner. Identity comes from the upstream auth provider."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String(255), unique=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class Author(Base):
    __tablename__ = "authors"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False, index=True)


class Book(Base):
    """Book in a user's library."""
    __tablename__ = "books"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(500), nullable=False)
    author_id = Column(String(36), ForeignKey("authors.id"))
    added_at = Column(DateTime, default=datetime.utcnow)

    author = relationship("Author", lazy="joined")


class ReadingList(Base):
    __tablename__ = "reading_lists"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True)

    books = relationship("ReadingListBook", back_populates="reading_list")


class ReadingListBook(Base):
    """Free-text entry of a curated reading list."""
    __tablename__ = "reading_list_books"

    id = Column(String(36), primary_key=True, default=_new_id)
    reading_list_id = Column(String(36), ForeignKey("reading_lists.id"), nullable=False)
    title = Column(String(500), nullable=False)
    author = Column(String(255), nullable=False, default="")

    reading_list = relationship("ReadingList", back_populates="books", lazy="joined")


class UserReadingListBook(Base):
    """A user's link from a reading list entry to a library book."""
    __tablename__ = "user_reading_list_books"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    reading_list_book_id = Column(String(36), ForeignKey("reading_list_books.id"), nullable=False)
    # NULL means the link is broken
    book_id = Column(String(36), ForeignKey("books.id"))

    reading_list_book = relationship("ReadingListBook", lazy="joined")

    __table_args__ = (
        Index("idx_user_reading_list_books_user", "user_id", "book_id"),
    )


class Challenge(Base):
    __tablename__ = "challenges"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    year = Column(Integer, nullable=False)

    books = relationship("ChallengeBook", back_populates="challenge")


class ChallengeBook(Base):
    """Free-text entry of a yearly reading challenge."""
    __tablename__ = "challenge_books"

    id = Column(String(36), primary_key=True, default=_new_id)
    challenge_id = Column(String(36), ForeignKey("challenges.id"), nullable=False)
    title = Column(String(500), nullable=False)
    author = Column(String(255), nullable=False, default="")

    challenge = relationship("Challenge", back_populates="books", lazy="joined")


class UserChallengeBook(Base):
    """A user's link from a challenge entry to a library book."""
    __tablename__ = "user_challenge_books"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False)
    challenge_book_id = Column(String(36), ForeignKey("challenge_books.id"), nullable=False)
    # NULL means the link is broken
    linked_book_id = Column(String(36), ForeignKey("books.id"))

    challenge_book = relationship("ChallengeBook", lazy="joined")

    __table_args__ = (
        Index("idx_user_challenge_books_user", "user_id", "linked_book_id"),
    )
