"""Keeps a collection of short notes in a JSON file.

If you installed via ``pip``, run ``notesjson -h`` to get help.

To use the Python API, look at :class:`notesjson.store.NoteStore`, or get one configured from
``~/.notesjson.conf.py`` with ``NotesjsonConf.for_user().instantiate()`` (see :mod:`notesjson.conf`).
"""
