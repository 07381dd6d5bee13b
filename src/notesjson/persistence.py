"""Reads and writes notes documents as JSON files.

The most important class is :class:`JsonPersistence`. Nothing else in the package touches note files directly.
"""

import json
import logging
import os
import os.path
import stat
from tempfile import mkstemp
from typing import Optional

from notesjson.models import NotesDocument

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Base class for failures reading or writing a notes document."""
    def __init__(self, message: str, path: str, cause: BaseException = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause


class LoadError(PersistenceError):
    """Raised when a notes document exists but cannot be read or parsed."""


class SaveError(PersistenceError):
    """Raised when a notes document cannot be written. The previous file contents, if any, are left intact."""


def _file_mode(path: str) -> int:
    """Returns the permission bits a rewrite of the path should get: the existing file's, or the umask default."""
    if os.path.exists(path):
        return stat.S_IMODE(os.stat(path).st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


class JsonPersistence:
    """Serializes :class:`notesjson.models.NotesDocument` instances to and from JSON files.

    .. attribute:: indent
       :type: Optional[int]

       Passed to :func:`json.dump`; None writes the document on a single line.
    """
    def __init__(self, indent: Optional[int] = 2):
        self.indent = indent

    def load(self, path: str) -> NotesDocument:
        """Reads the document at the given path.

        Returns an empty document if nothing exists at the path.

        Raises :exc:`LoadError` if the file cannot be read or is not a notes document.
        """
        if not os.path.exists(path):
            logger.debug('No notes document at %s', path)
            return NotesDocument()
        try:
            with open(path, 'r', encoding='utf-8') as file:
                raw = json.load(file)
            doc = NotesDocument.from_json(raw)
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise LoadError(f'Could not load notes from {path}: {e}', path, e) from e
        logger.debug('Loaded %d notes from %s', len(doc.notes), path)
        return doc

    def save(self, path: str, doc: NotesDocument) -> None:
        """Writes the document to the given path, replacing any existing file.

        The document is first written to a temporary file in the same directory, which is then renamed over the
        destination, so readers never see a partially written document.

        Raises :exc:`SaveError` if the document cannot be written.
        """
        parent, filename = os.path.split(os.path.abspath(path))
        tmp = None
        try:
            fd, tmp = mkstemp(prefix=f'.{filename}.', suffix='.tmp', dir=parent)
            with os.fdopen(fd, 'w', encoding='utf-8') as file:
                json.dump(doc.as_json(), file, indent=self.indent, ensure_ascii=False)
                file.write('\n')
            os.chmod(tmp, _file_mode(path))
            os.replace(tmp, path)
        except (OSError, TypeError, ValueError) as e:
            if tmp and os.path.exists(tmp):
                os.remove(tmp)
            raise SaveError(f'Could not save notes to {path}: {e}', path, e) from e
        logger.debug('Saved %d notes to %s', len(doc.notes), path)
