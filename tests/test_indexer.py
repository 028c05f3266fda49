from labkit.mrapps import indexer


def test_map_emits_each_word_once():
    result = indexer.map_function("doc", "a b a c, b!")
    keys = [kv.key for kv in result]
    assert sorted(keys) == ["a", "b", "c"]
    assert len(keys) == len(set(keys))
    assert all(kv.value == "doc" for kv in result)


def test_map_of_text_without_letters():
    assert indexer.map_function("doc", "123 456") == []


def test_reduce_sorts_documents():
    values = ["pg-b.txt", "pg-a.txt"]
    assert indexer.reduce_function("w", values) == "2 pg-a.txt,pg-b.txt"
    assert values == ["pg-b.txt", "pg-a.txt"]