"""Command-line interface for notesjson."""


import argparse
import json
import logging
import os.path
import sys
from typing import List
from terminaltables import AsciiTable
from notesjson.conf import NotesjsonConf
from notesjson.models import Note, NoteUpdate
from notesjson.persistence import PersistenceError
from notesjson.store import NoteStore

PREVIEW_LENGTH = 50


def _split_tags(val: str) -> List[str]:
    return [t.strip() for t in val.split(',') if t.strip()]


def _preview(content: str) -> str:
    if len(content) > PREVIEW_LENGTH:
        return content[:PREVIEW_LENGTH] + '...'
    return content


def _timestamp(note_time) -> str:
    return note_time.strftime('%Y-%m-%d %H:%M:%S') if note_time else ''


def _print_note(note: Note) -> None:
    print('=' * 60)
    print(note.title)
    print('=' * 60)
    print(f'\n{note.content}\n')
    print(f'tags: {", ".join(note.tags) or "none"}')
    print(f'id: {note.id}')
    print(f'created: {_timestamp(note.created)}')
    print(f'updated: {_timestamp(note.updated)}')


def _print_notes(notes: List[Note], args, verbose=False) -> None:
    if args.json:
        print(json.dumps([n.as_json() for n in notes], ensure_ascii=False))
        return
    if args.table:
        data = [('ID', 'Title', 'Tags', 'Updated')]
        data.extend((n.id, n.title, '\n'.join(n.tags), _timestamp(n.updated)) for n in notes)
        print(AsciiTable(data).table)
        return
    for i, note in enumerate(notes, 1):
        print(f'[{i}] {note.title}')
        print(f'    id: {note.id}')
        if verbose:
            print(f'    content: {note.content}')
            print(f'    tags: {", ".join(note.tags) or "none"}')
            print(f'    created: {_timestamp(note.created)}')
            print(f'    updated: {_timestamp(note.updated)}')
        else:
            print(f'    {_preview(note.content)}')
            if note.tags:
                print(f'    tags: {", ".join(note.tags)}')
        print('')


def _create(args, store: NoteStore) -> int:
    note = store.create(args.title, args.content, _split_tags(args.tags) if args.tags else [])
    print(f'Created note {note.id}')
    print(f'title: {note.title}')
    print(f'tags: {", ".join(note.tags) or "none"}')
    return 0


def _list(args, store: NoteStore) -> int:
    notes = store.list()
    if not notes and not args.json:
        print('No notes found.')
        return 0
    if not (args.json or args.table):
        print(f'{len(notes)} note(s):\n')
    _print_notes(notes, args, verbose=args.verbose)
    return 0


def _show(args, store: NoteStore) -> int:
    note = store.get(args.id)
    if not note:
        print(f'No note found with id {args.id}', file=sys.stderr)
        return 1
    if args.json:
        print(json.dumps(note.as_json(), ensure_ascii=False))
    else:
        _print_note(note)
    return 0


def _search(args, store: NoteStore) -> int:
    notes = store.search(args.query, include_tags=not args.no_tags)
    if not notes and not args.json:
        print(f'No notes found for "{args.query}".')
        return 0
    if not (args.json or args.table):
        print(f'{len(notes)} note(s) found for "{args.query}":\n')
    _print_notes(notes, args)
    return 0


def _tag(args, store: NoteStore) -> int:
    notes = store.filter_by_tag(args.tag)
    if not notes and not args.json:
        print(f'No notes tagged "{args.tag}".')
        return 0
    if not (args.json or args.table):
        print(f'{len(notes)} note(s) tagged "{args.tag}":\n')
    _print_notes(notes, args)
    return 0


def _tags(args, store: NoteStore) -> int:
    counts = store.tag_counts()
    if args.json:
        print(json.dumps(counts, ensure_ascii=False))
    else:
        tags = sorted(counts.keys())
        data = [('Tag', 'Count')] + [(t, counts[t]) for t in tags]
        table = AsciiTable(data)
        table.justify_columns[1] = 'right'
        print(table.table)
    return 0


def _update(args, store: NoteStore) -> int:
    changes = NoteUpdate(title=args.title,
                         content=args.content,
                         tags=_split_tags(args.tags) if args.tags is not None else None)
    if changes.is_empty():
        print('Nothing to update; pass at least one of --title, --content, --tags', file=sys.stderr)
        return 1
    note = store.update(args.id, changes)
    if not note:
        print(f'No note found with id {args.id}', file=sys.stderr)
        return 1
    print(f'Updated note {note.id}')
    return 0


def _delete(args, store: NoteStore) -> int:
    if not store.delete(args.id):
        print(f'No note found with id {args.id}', file=sys.stderr)
        return 1
    print(f'Deleted note {args.id}')
    return 0


def _export(args, store: NoteStore) -> int:
    path = os.path.abspath(args.path)
    store.export_to(path)
    print(f'Exported {len(store)} note(s) to {path}')
    return 0


def _import(args, store: NoteStore) -> int:
    path = os.path.abspath(args.path)
    store.import_from(path, merge=args.merge)
    print(f'Imported notes from {path}; the collection now has {len(store)} note(s)')
    return 0


def _clear(args, store: NoteStore) -> int:
    if not args.yes:
        print('Refusing to delete every note without --yes', file=sys.stderr)
        return 1
    store.clear()
    print('Deleted all notes')
    return 0


def _add_format_args(p: argparse.ArgumentParser) -> None:
    formats = p.add_mutually_exclusive_group()
    formats.add_argument('-j', '--json', help='Output as JSON.', action='store_true')
    formats.add_argument('-T', '--table', help='Format output as a table.', action='store_true')


def argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Manage notes stored in a JSON file.')
    parser.set_defaults(func=None)
    parser.add_argument('-f', '--file',
                        help='Path of the notes document. Overrides store_path from ~/.notesjson.conf.py; '
                             'the default is notes.json in the current directory.')
    parser.add_argument('--debug', action='store_true', help='Log debugging details to stderr.')

    subs = parser.add_subparsers(title='Commands')

    p_create = subs.add_parser('create', help='Create a new note and print its id.')
    p_create.add_argument('-t', '--title', required=True, help='Title of the note.')
    p_create.add_argument('-c', '--content', required=True, help='Content of the note.')
    p_create.add_argument('-g', '--tags', help='Comma-separated list of tags.')
    p_create.set_defaults(func=_create)

    p_list = subs.add_parser('list', help='List all notes, oldest first.')
    p_list.add_argument('-v', '--verbose', action='store_true',
                        help='Show full content, tags, and timestamps instead of a preview.')
    _add_format_args(p_list)
    p_list.set_defaults(func=_list)

    p_show = subs.add_parser('show', help='Show a single note.')
    p_show.add_argument('id', help='Id of the note.')
    p_show.add_argument('-j', '--json', action='store_true', help='Output as JSON.')
    p_show.set_defaults(func=_show)

    p_search = subs.add_parser(
        'search',
        help='Find notes whose title, content, or tags contain the query. Matching ignores case.')
    p_search.add_argument('query', help='Text to look for.')
    p_search.add_argument('--no-tags', action='store_true', help='Only search titles and content.')
    _add_format_args(p_search)
    p_search.set_defaults(func=_search)

    p_tag = subs.add_parser('tag', help='List notes having a tag. Matching ignores case but is otherwise exact.')
    p_tag.add_argument('tag', help='Tag to look for.')
    _add_format_args(p_tag)
    p_tag.set_defaults(func=_tag)

    p_tags = subs.add_parser('tags', help='Show a list of tags and the number of notes that have each tag.')
    p_tags.add_argument('-j', '--json', action='store_true',
                        help='Output as JSON. The output is an object whose keys are tags and whose values '
                             'are the number of notes that possess that tag.')
    p_tags.set_defaults(func=_tags)

    p_update = subs.add_parser('update', help='Change the title, content, or tags of a note. '
                                              'Fields that are not given are left as they are.')
    p_update.add_argument('id', help='Id of the note.')
    p_update.add_argument('-t', '--title', help='New title.')
    p_update.add_argument('-c', '--content', help='New content.')
    p_update.add_argument('-g', '--tags', help='New comma-separated list of tags, replacing the old ones. '
                                               'Pass an empty string to remove all tags.')
    p_update.set_defaults(func=_update)

    p_delete = subs.add_parser('delete', help='Delete a note.')
    p_delete.add_argument('id', help='Id of the note.')
    p_delete.set_defaults(func=_delete)

    p_export = subs.add_parser('export', help='Write all notes to another file.')
    p_export.add_argument('path', help='Destination file. It will be overwritten if it exists.')
    p_export.set_defaults(func=_export)

    p_import = subs.add_parser('import', help='Load notes from a file written by the export command. '
                                              'By default the imported notes replace all existing notes.')
    p_import.add_argument('path', help='File to import.')
    p_import.add_argument('-m', '--merge', action='store_true',
                          help='Add the imported notes after the existing ones instead of replacing them. '
                               'Ids are not de-duplicated.')
    p_import.set_defaults(func=_import)

    p_clear = subs.add_parser('clear', help='Delete every note.')
    p_clear.add_argument('-y', '--yes', action='store_true', help='Confirm that every note should be deleted.')
    p_clear.set_defaults(func=_clear)

    return parser


def main(args=None) -> int:
    """Runs the tool and returns its exit code.

    args may be an array of string command-line arguments; if absent,
    the process's arguments are used.
    """
    parser = argparser()
    args = parser.parse_args(args)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING,
                        format='%(levelname)s: %(message)s')
    if not args.func:
        parser.print_help()
        return 1
    conf = NotesjsonConf.for_user()
    if args.file:
        conf.store_path = args.file
    store = conf.instantiate()
    try:
        return args.func(args, store)
    except PersistenceError as e:
        print(f'Error: {e.message}', file=sys.stderr)
        return 1
