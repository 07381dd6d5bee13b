"""Provides the :class:`NoteStore` class, which holds a collection of notes and keeps it saved to disk."""

from __future__ import annotations
from collections import defaultdict
from datetime import datetime, timezone
import logging
import os.path
from typing import Callable, Dict, Iterable, List, Optional

import shortuuid

from notesjson.models import Note, NotesDocument, NoteUpdate, NoteUpdateIsh
from notesjson.persistence import JsonPersistence, LoadError

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = 'notes.json'


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_id(now: datetime) -> str:
    """Returns a new note id such as ``note_1335927845000_mhvXdrZT4jP5T8vBxuvm75``.

    The millisecond timestamp keeps ids roughly sortable; the shortuuid keeps ids created within the same
    millisecond distinct.
    """
    return f'note_{int(now.timestamp() * 1000)}_{shortuuid.uuid()}'


class NoteStore:
    """The authoritative collection of notes for one process.

    Constructing an instance loads the document at :attr:`path`. Every method that changes the collection saves
    the whole document back to :attr:`path` before returning; if saving fails, the
    :exc:`notesjson.persistence.SaveError` propagates and the collection is left as it was before the call.

    If the document at :attr:`path` exists but cannot be loaded, the store starts out empty, logs a warning, and
    keeps the error in :attr:`load_error`. The broken file will be overwritten by the next change.

    Notes returned by this class should be treated as read-only; use :meth:`update` to change them.

    .. attribute:: path
       :type: str

       The primary document. Defaults to ``notes.json`` in the working directory.

    .. attribute:: load_error
       :type: Optional[notesjson.persistence.LoadError]

    Example:

    .. code-block:: python

       from notesjson.store import NoteStore
       store = NoteStore('/home/me/notes.json')
       note = store.create('Groceries', 'Bread and milk', ['personal'])
       store.update(note.id, {'tags': ['personal', 'errands']})
       for n in store.filter_by_tag('ERRANDS'):
           print(n.title)
    """

    def __init__(self, path: str = None, *, persistence: JsonPersistence = None,
                 clock: Callable[[], datetime] = utcnow, id_factory: Callable[[datetime], str] = generate_id):
        self.path = path if path is not None else os.path.join(os.getcwd(), DEFAULT_FILENAME)
        self.persistence = persistence or JsonPersistence()
        self.clock = clock
        self.id_factory = id_factory
        self.load_error = None
        try:
            self._notes = self.persistence.load(self.path).notes
        except LoadError as e:
            logger.warning('%s; starting with an empty collection', e.message)
            self.load_error = e
            self._notes = []

    def __len__(self) -> int:
        return len(self._notes)

    def _commit(self, notes: List[Note]) -> None:
        self.persistence.save(self.path, NotesDocument.of(notes))
        self._notes = notes

    def _new_id(self, now: datetime) -> str:
        existing = {n.id for n in self._notes}
        while True:
            note_id = self.id_factory(now)
            if note_id not in existing:
                return note_id

    def _index(self, note_id: str) -> Optional[int]:
        for i, note in enumerate(self._notes):
            if note.id == note_id:
                return i
        return None

    def create(self, title: str, content: str, tags: Iterable[str] = ()) -> Note:
        """Adds a new note to the end of the collection and returns it."""
        now = self.clock()
        note = Note(id=self._new_id(now), title=title, content=content, tags=list(tags), created=now, updated=now)
        self._commit(self._notes + [note])
        logger.debug('Created note %s', note.id)
        return note

    def list(self) -> List[Note]:
        """Returns all notes, in the order they were added."""
        return list(self._notes)

    def get(self, note_id: str) -> Optional[Note]:
        """Returns the note with the given id, or None."""
        i = self._index(note_id)
        return None if i is None else self._notes[i]

    def update(self, note_id: str, changes: NoteUpdateIsh) -> Optional[Note]:
        """Replaces the supplied fields of a note and refreshes its :attr:`Note.updated` time.

        ``changes`` may be a :class:`notesjson.models.NoteUpdate` or a dict like ``{'title': 'New'}``.
        The update time is refreshed even if none of the supplied values differ from the current ones.

        Returns the updated note, or None (without changing anything) if there is no note with the given id.
        """
        changes = NoteUpdate.parse(changes)
        i = self._index(note_id)
        if i is None:
            return None
        old = self._notes[i]
        note = changes.apply(old, max(self.clock(), old.updated))
        notes = list(self._notes)
        notes[i] = note
        self._commit(notes)
        logger.debug('Updated note %s', note_id)
        return note

    def delete(self, note_id: str) -> bool:
        """Removes the note with the given id. Returns False if there was no such note."""
        remaining = [n for n in self._notes if n.id != note_id]
        if len(remaining) == len(self._notes):
            return False
        self._commit(remaining)
        logger.debug('Deleted note %s', note_id)
        return True

    def search(self, query: str, include_tags: bool = True) -> List[Note]:
        """Returns notes whose title, content, or (if include_tags) any tag contains the query, ignoring case.

        An empty query matches every note.
        """
        return [n for n in self._notes if n.matches(query, include_tags)]

    def filter_by_tag(self, tag: str) -> List[Note]:
        """Returns notes having the given tag. Tags must match exactly, apart from case."""
        return [n for n in self._notes if n.has_tag(tag)]

    def tag_counts(self) -> Dict[str, int]:
        """Returns a map of lowercased tag names to the number of notes with that tag."""
        result = defaultdict(int)
        for note in self._notes:
            for tag in {t.lower() for t in note.tags}:
                result[tag] += 1
        return dict(result)

    def clear(self) -> None:
        """Removes every note."""
        self._commit([])
        logger.debug('Cleared all notes')

    def export_to(self, path: str) -> None:
        """Writes all notes to another file. The primary document is not affected."""
        self.persistence.save(path, NotesDocument.of(self._notes))
        logger.info('Exported %d notes to %s', len(self._notes), path)

    def import_from(self, path: str, merge: bool = False) -> None:
        """Loads notes from another file, keeping their ids and timestamps.

        If merge is False, the imported notes replace the whole collection. If merge is True, they are added after
        the existing notes; ids are not checked for collisions, so this can leave two notes with the same id.

        Raises :exc:`notesjson.persistence.LoadError` if the file is missing or cannot be parsed.
        """
        if not os.path.exists(path):
            raise LoadError(f'No notes document at {path}', path, FileNotFoundError(path))
        imported = self.persistence.load(path).notes
        self._commit(self._notes + imported if merge else imported)
        logger.info('Imported %d notes from %s%s', len(imported), path, ' (merged)' if merge else '')
