"""Defines classes for representing notes, update requests, and the persisted document.

The most important classes are :class:`Note` and :class:`NoteUpdate`.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Iterable, List, Mapping, Optional, Union


def parse_timestamp(val: str) -> datetime:
    """Parses an ISO-8601 timestamp as stored in a notes document.

    A trailing ``Z`` is accepted, since other tools commonly write UTC that way. Timestamps without a
    timezone are assumed to be UTC.
    """
    if not isinstance(val, str):
        raise TypeError(f'Expected an ISO-8601 string but got {type(val).__name__}')
    if val.endswith('Z'):
        val = val[:-1] + '+00:00'
    result = datetime.fromisoformat(val)
    if not result.tzinfo:
        result = result.replace(tzinfo=timezone.utc)
    return result


def _require(raw: Mapping, key: str, cls: type):
    if key not in raw:
        raise KeyError(f'Missing field: {key}')
    val = raw[key]
    if not isinstance(val, cls):
        raise TypeError(f'Field {key} should be {cls.__name__} but got {type(val).__name__}')
    return val


@dataclass
class Note:
    """A titled, tagged, timestamped piece of text.

    Instances are created by :meth:`notesjson.store.NoteStore.create` or read from a document; the store
    replaces them rather than editing them in place when they are updated.
    """

    id: str
    """Unique within a store. Never changes after creation."""

    title: str

    content: str

    tags: List[str]
    """Tags in the order they were given. Duplicates are kept; comparisons ignore case."""

    created: datetime
    """When the note was created. Never changes after creation."""

    updated: datetime
    """When the note was created or last updated. Always at or after :attr:`created`."""

    def has_tag(self, tag: str) -> bool:
        """True if any of the note's tags equals the given tag, ignoring case."""
        tag = tag.lower()
        return any(t.lower() == tag for t in self.tags)

    def matches(self, query: str, include_tags: bool = True) -> bool:
        """True if the query is a case-insensitive substring of the title, content, or (optionally) a tag."""
        query = query.lower()
        if query in self.title.lower() or query in self.content.lower():
            return True
        return include_tags and any(query in t.lower() for t in self.tags)

    def as_json(self) -> dict:
        """Returns a dict representing the instance, suitable for serializing as json."""
        return {
            'id': self.id,
            'title': self.title,
            'content': self.content,
            'tags': list(self.tags),
            'createdAt': self.created.isoformat(),
            'updatedAt': self.updated.isoformat(),
        }

    @classmethod
    def from_json(cls, raw: Mapping) -> Note:
        """Builds an instance from a dict in the format produced by :meth:`as_json`.

        Raises :exc:`KeyError`, :exc:`TypeError`, or :exc:`ValueError` if the dict is not shaped like a note.
        """
        if not isinstance(raw, Mapping):
            raise TypeError(f'Expected a note object but got {type(raw).__name__}')
        tags = _require(raw, 'tags', list)
        if not all(isinstance(t, str) for t in tags):
            raise TypeError('Tags must be strings')
        return cls(
            id=_require(raw, 'id', str),
            title=_require(raw, 'title', str),
            content=_require(raw, 'content', str),
            tags=list(tags),
            created=parse_timestamp(_require(raw, 'createdAt', str)),
            updated=parse_timestamp(_require(raw, 'updatedAt', str)))


@dataclass
class NoteUpdate:
    """Represents a request to change some of a note's fields.

    Each attribute is None when that field should be left alone. The id and creation time of a note cannot be
    changed, so there are no attributes for them.

    Methods that take a NoteUpdate parameter also accept a dict such as ``{'title': 'New title'}`` as a
    convenience, which they pass to :meth:`parse`.
    """

    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[str]] = None

    def __post_init__(self):
        if isinstance(self.tags, str):
            raise TypeError('Tags must be a list of strings, not a single string')

    @classmethod
    def parse(cls, val: NoteUpdateIsh) -> NoteUpdate:
        """Converts the parameter to a NoteUpdate, if it isn't one already.

        Raises :exc:`TypeError` for keys that are not updatable fields, such as ``id``, or if ``tags`` is a
        single string.
        """
        if isinstance(val, NoteUpdate):
            return val
        allowed = {f.name for f in fields(cls)}
        unknown = set(val) - allowed
        if unknown:
            raise TypeError(f'Cannot update field(s): {", ".join(sorted(unknown))}')
        return cls(**val)

    def is_empty(self) -> bool:
        return self.title is None and self.content is None and self.tags is None

    def apply(self, note: Note, updated: datetime) -> Note:
        """Returns a copy of the note with the supplied fields replaced and :attr:`Note.updated` set."""
        return Note(
            id=note.id,
            title=note.title if self.title is None else self.title,
            content=note.content if self.content is None else self.content,
            tags=list(note.tags if self.tags is None else self.tags),
            created=note.created,
            updated=updated)


NoteUpdateIsh = Union[NoteUpdate, Mapping[str, object]]


@dataclass
class NotesDocument:
    """The envelope persisted on disk: every note, in store order."""

    notes: List[Note] = field(default_factory=list)

    def as_json(self) -> dict:
        return {'notes': [n.as_json() for n in self.notes]}

    @classmethod
    def from_json(cls, raw: Mapping) -> NotesDocument:
        if not isinstance(raw, Mapping):
            raise TypeError(f'Expected a document object but got {type(raw).__name__}')
        return cls(notes=[Note.from_json(n) for n in _require(raw, 'notes', list)])

    @classmethod
    def of(cls, notes: Iterable[Note]) -> NotesDocument:
        return cls(notes=list(notes))
