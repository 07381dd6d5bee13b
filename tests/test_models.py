from datetime import datetime, timedelta, timezone
import pytest

from notesjson.models import Note, NoteUpdate, NotesDocument, parse_timestamp

CREATED = datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def note(**kwargs):
    defaults = dict(id='n1', title='Meeting', content='Discuss the roadmap', tags=['Work', 'q3'],
                    created=CREATED, updated=CREATED)
    defaults.update(kwargs)
    return Note(**defaults)


def test_parse_timestamp_accepts_z_suffix():
    assert parse_timestamp('2020-01-02T03:04:05.000Z') == CREATED
    assert parse_timestamp('2020-01-02T03:04:05.000Z').tzinfo is not None


def test_parse_timestamp_assumes_utc_when_naive():
    assert parse_timestamp('2020-01-02T03:04:05') == CREATED


def test_parse_timestamp_keeps_offsets():
    assert parse_timestamp('2020-01-02T05:04:05+02:00') == CREATED


def test_parse_timestamp_rejects_garbage():
    with pytest.raises(ValueError):
        parse_timestamp('yesterday')
    with pytest.raises(TypeError):
        parse_timestamp(12345)


def test_has_tag_ignores_case_but_not_substrings():
    n = note(tags=['Urgent', 'projet-x'])
    assert n.has_tag('urgent')
    assert n.has_tag('URGENT')
    assert n.has_tag('Projet-X')
    assert not n.has_tag('projet')
    assert not note(tags=[]).has_tag('')


def test_matches():
    n = note()
    assert n.matches('MEET')
    assert n.matches('roadmap')
    assert n.matches('work')
    assert not n.matches('work', include_tags=False)
    assert not n.matches('budget')
    assert n.matches('')
    assert note(title='', content='', tags=[]).matches('')


def test_as_json():
    n = note(updated=CREATED + timedelta(minutes=1))
    assert n.as_json() == {
        'id': 'n1',
        'title': 'Meeting',
        'content': 'Discuss the roadmap',
        'tags': ['Work', 'q3'],
        'createdAt': '2020-01-02T03:04:05+00:00',
        'updatedAt': '2020-01-02T03:05:05+00:00',
    }


def test_from_json():
    raw = {'id': 'note_1_abc', 'title': '', 'content': 'Créer une app', 'tags': ['b', 'a', 'b'],
           'createdAt': '2020-01-02T03:04:05.000Z', 'updatedAt': '2020-01-02T03:04:06.000Z'}
    assert Note.from_json(raw) == Note('note_1_abc', '', 'Créer une app', ['b', 'a', 'b'],
                                       CREATED, CREATED + timedelta(seconds=1))


@pytest.mark.parametrize('change', [
    {'id': None},
    {'id': 7},
    {'tags': 'work'},
    {'tags': ['work', 3]},
    {'createdAt': 'not a date'},
])
def test_from_json_rejects_malformed_notes(change):
    raw = note().as_json()
    raw.update(change)
    with pytest.raises((KeyError, TypeError, ValueError)):
        Note.from_json(raw)


def test_from_json_rejects_missing_fields():
    raw = note().as_json()
    del raw['updatedAt']
    with pytest.raises(KeyError):
        Note.from_json(raw)


def test_document_from_json():
    assert NotesDocument.from_json({'notes': []}) == NotesDocument()
    assert NotesDocument.from_json({'notes': [note().as_json()]}) == NotesDocument([note()])
    with pytest.raises(KeyError):
        NotesDocument.from_json({})
    with pytest.raises(TypeError):
        NotesDocument.from_json([])
    with pytest.raises(TypeError):
        NotesDocument.from_json({'notes': {}})


def test_parse_update():
    assert NoteUpdate.parse({}) == NoteUpdate()
    assert NoteUpdate.parse({'title': '', 'tags': ['x']}) == NoteUpdate(title='', tags=['x'])
    existing = NoteUpdate(content='c')
    assert NoteUpdate.parse(existing) is existing


@pytest.mark.parametrize('key', ['id', 'created', 'createdAt', 'updated', 'colour'])
def test_parse_update_rejects_unchangeable_fields(key):
    with pytest.raises(TypeError, match=key):
        NoteUpdate.parse({key: 'x', 'title': 'ok'})


def test_update_is_empty():
    assert NoteUpdate().is_empty()
    assert not NoteUpdate(title='').is_empty()
    assert not NoteUpdate(tags=[]).is_empty()


def test_update_apply_only_changes_supplied_fields():
    later = CREATED + timedelta(hours=1)
    original = note()
    result = NoteUpdate(content='Discuss the budget', tags=[]).apply(original, later)
    assert result == note(content='Discuss the budget', tags=[], updated=later)
    assert original == note()


def test_update_rejects_single_string_tags():
    with pytest.raises(TypeError, match='Tags'):
        NoteUpdate.parse({'tags': 'work'})
    with pytest.raises(TypeError, match='Tags'):
        NoteUpdate(tags='work')


def test_note_requires_timestamps():
    with pytest.raises(TypeError):
        Note('n1', 'title', 'content', [])
