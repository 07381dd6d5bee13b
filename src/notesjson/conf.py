from __future__ import annotations
from dataclasses import dataclass, replace
import os.path
from typing import Optional

from notesjson.persistence import JsonPersistence
from notesjson.store import DEFAULT_FILENAME, NoteStore


@dataclass
class NotesjsonConf:
    store_path: str = DEFAULT_FILENAME
    """Where the notes document is kept.

    Relative paths are resolved against the working directory when the configuration is standardized, which
    happens right before a store is created. The file is created the first time a note is saved.
    """

    json_indent: Optional[int] = 2
    """Indentation used when writing notes documents (both the primary document and exports).

    Set to None to write each document on a single line.
    """

    @classmethod
    def user_config_path(cls) -> str:
        return os.path.expanduser(os.path.join('~', '.notesjson.conf.py'))

    @classmethod
    def for_user(cls) -> NotesjsonConf:
        """Loads configuration from ``~/.notesjson.conf.py``, or returns the defaults if that file doesn't exist.

        The file is a Python script which should assign an instance of NotesjsonConf to the variable ``conf``,
        for example:

        .. code-block:: python

           from notesjson.conf import NotesjsonConf
           conf = NotesjsonConf(store_path='/Users/jacob/Documents/notes.json')
        """
        path = cls.user_config_path()
        if not os.path.exists(path):
            return cls()
        with open(path, 'r') as file:
            conf_script = file.read()
        context = {}
        exec(conf_script, context)
        if 'conf' not in context or not isinstance(context['conf'], cls):
            raise Exception('You need to assign an instance of NotesjsonConf to the variable `conf` '
                            f'in your config file: {path}')
        return context['conf']

    def standardize(self) -> NotesjsonConf:
        return replace(
            self,
            store_path=os.path.abspath(os.path.expanduser(self.store_path))
        )

    def instantiate(self) -> NoteStore:
        conf = self.standardize()
        return NoteStore(conf.store_path, persistence=JsonPersistence(indent=conf.json_indent))
