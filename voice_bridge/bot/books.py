"""
A toy, read-only book catalogue used to demonstrate tool calling.

``build_book_registry`` exposes three tools over the catalogue: ``list`` books
by genre, ``search`` by title and ``get`` a single book by id.
"""

from typing import Dict, List, Sequence

from pydantic import BaseModel, ConfigDict

from voice_bridge.bot.tools import ToolRegistry
from voice_bridge.errors import ToolNotFoundError

GENRES = ["mystery", "nonfiction", "memoir", "romance", "historical"]


class Book(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    genre: str
    description: str


BOOKS = (
    Book(
        id="a1",
        name="To Kill a Mockingbird",
        genre="historical",
        description=(
            "Compassionate, dramatic, and deeply moving, To Kill A Mockingbird takes "
            "readers to the roots of human behavior - to innocence and experience, "
            "kindness and cruelty, love and hatred, humor and pathos."
        ),
    ),
    Book(
        id="a2",
        name="All the Light We Cannot See",
        genre="historical",
        description=(
            "In a mining town in Germany, Werner Pfennig, an orphan, grows up with his "
            "younger sister, enchanted by a crude radio they find that brings them news "
            "and stories from places they have never seen or imagined."
        ),
    ),
    Book(
        id="a3",
        name="Where the Crawdads Sing",
        genre="historical",
        description=(
            "For years, rumors of the 'Marsh Girl' haunted Barkley Cove, a quiet fishing "
            "village. Kya Clark is barefoot and wild; unfit for polite society."
        ),
    ),
)


def build_book_registry(books: Sequence[Book] = BOOKS) -> ToolRegistry:
    """
    Create a ToolRegistry whose tools read from ``books``.

    Args:
        books: Catalogue backing the tools; never modified

    Returns:
        ToolRegistry: Registry with the ``list``, ``search`` and ``get`` tools
    """
    registry = ToolRegistry()

    @registry.tool(
        name="list",
        description="list queries books by genre, and returns a list of names of books",
        parameters={
            "type": "object",
            "properties": {"genre": {"type": "string", "enum": GENRES}},
            "required": ["genre"],
        },
    )
    def list_books(genre: str) -> List[Dict[str, str]]:
        return [{"name": book.name, "id": book.id} for book in books if book.genre == genre]

    @registry.tool(
        name="search",
        description="search queries books by their name and returns a list of book names and their ids",
        parameters={
            "type": "object",
            "properties": {"name": {"type": "string"}},
            "required": ["name"],
        },
    )
    def search_books(name: str) -> List[Dict[str, str]]:
        needle = name.lower()
        return [{"name": book.name, "id": book.id} for book in books if needle in book.name.lower()]

    @registry.tool(
        name="get",
        description=(
            "get returns a book's detailed information based on the id of the book. "
            "Note that this does not accept names, and only IDs, which you can get by "
            "using search."
        ),
        parameters={
            "type": "object",
            "properties": {"id": {"type": "string"}},
            "required": ["id"],
        },
    )
    def get_book(id: str) -> Book:
        for book in books:
            if book.id == id:
                return book
        raise ToolNotFoundError("get", f"No book with id {id}")

    return registry
