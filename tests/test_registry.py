import logging

from chandl.models import RegistryEntry
from chandl.registry import ThreadRegistry


def test_load_missing_file_creates_it(tmp_path):
    path = tmp_path / 'threads.txt'
    registry = ThreadRegistry(str(path))

    assert registry.load() == []
    assert path.exists()
    assert path.read_text(encoding='utf-8') == ''


def test_save_after_missing_load_creates_file(tmp_path):
    path = tmp_path / 'threads.txt'
    registry = ThreadRegistry(str(path))
    entries = registry.load()
    entries = registry.upsert(entries, RegistryEntry('https://boards.4chan.org/g/thread/1', '1'))
    registry.save(entries)

    assert path.read_text(encoding='utf-8') == 'https://boards.4chan.org/g/thread/1;1\n'


def test_round_trip_preserves_content(tmp_path):
    content = (
        'https://boards.4chan.org/wg/thread/111;111\n'
        'https://desuarchive.org/g/thread/222/;Desktop threads\n'
        'https://boards.4chan.org/wg/thread/111;Walls ☆\n'
    )
    path = tmp_path / 'threads.txt'
    path.write_text(content, encoding='utf-8')
    registry = ThreadRegistry(str(path))

    registry.save(registry.load())

    assert path.read_text(encoding='utf-8') == content


def test_name_may_contain_separator_after_the_first(tmp_path):
    path = tmp_path / 'threads.txt'
    path.write_text('https://x.example/g/thread/1;a;b\n', encoding='utf-8')

    assert ThreadRegistry(str(path)).load() == [RegistryEntry('https://x.example/g/thread/1', 'a;b')]


def test_malformed_lines_are_skipped(tmp_path, caplog):
    path = tmp_path / 'threads.txt'
    path.write_text('garbage\n\nhttps://x.example/g/thread/1;1\n', encoding='utf-8')

    with caplog.at_level(logging.WARNING, logger='chandl'):
        entries = ThreadRegistry(str(path)).load()

    assert entries == [RegistryEntry('https://x.example/g/thread/1', '1')]
    assert 'malformed line 1' in caplog.text


def test_upsert_dedups_by_whole_entry():
    a = RegistryEntry('https://x.example/g/thread/1', '1')
    b = RegistryEntry('https://x.example/g/thread/2', '2')

    assert ThreadRegistry.upsert([a, b], a) == [a, b]
    assert ThreadRegistry.upsert([a], b) == [a, b]


def test_upsert_keeps_renamed_thread_twice():
    old = RegistryEntry('https://x.example/g/thread/1', '1')
    renamed = RegistryEntry('https://x.example/g/thread/1', 'Walls')

    assert ThreadRegistry.upsert([old], renamed) == [old, renamed]
