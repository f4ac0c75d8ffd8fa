import io
import json
import logging
import random
import threading

import pytest

from memvec.adapters.vectorstores import json_codec
from memvec.adapters.vectorstores.simple_store import SimpleVectorStore
from memvec.domain.errors import IOFailure
from memvec.domain.models import Document, StoredEntry


def test_save_and_load_vector_store(store, embedder, tmp_path):
    store.add([Document(doc_id="1", content="test content", metadata={"key": "value"})])

    save_file = tmp_path / "vector-store.json"
    store.save(save_file)

    loaded = SimpleVectorStore(embedder)
    loaded.load(save_file)

    results = loaded.similarity_search("test content")
    assert len(results) == 1
    doc = results[0].document
    assert (doc.doc_id, doc.content) == ("1", "test content")
    assert doc.metadata["key"] == "value"


def test_round_trip_preserves_entries_exactly(embedder, tmp_path):
    rng = random.Random(7)
    store = SimpleVectorStore(embedder)
    docs = []
    for i in range(25):
        content = f"document {i} ünïcødé"
        embedder.vectors[content] = [rng.uniform(-1, 1) for _ in range(3)]
        docs.append(
            Document(
                doc_id=f"id-{i}",
                content=content,
                metadata={"n": i, "ratio": i / 7, "flag": i % 2 == 0, "tag": None, "name": f"n{i}"},
            )
        )
    store.add(docs)

    path = tmp_path / "store.json"
    store.save(path)
    restored = SimpleVectorStore(embedder)
    restored.load(path)

    assert restored.snapshot_entries() == store.snapshot_entries()
    for doc in docs:
        hits = restored.similarity_search(doc.content)
        assert any(
            h.document.doc_id == doc.doc_id
            and h.document.content == doc.content
            and dict(h.document.metadata) == dict(doc.metadata)
            for h in hits
        )


def test_saved_file_is_human_readable_json(store, tmp_path):
    store.add([Document(doc_id="a", content="alpha", metadata={"k": "v"})])
    path = tmp_path / "store.json"
    store.save(path)

    text = path.read_text(encoding="utf-8")
    assert "\n  " in text
    assert json.loads(text) == {
        "a": {"id": "a", "content": "alpha", "metadata": {"k": "v"}, "embedding": [0.1, 0.2, 0.3]}
    }
    assert list(tmp_path.glob("*.tmp")) == []


def test_load_accepts_compact_json(embedder):
    payload = {"x": {"content": "c", "metadata": {}, "embedding": [1, 2.5, -3]}}
    store = SimpleVectorStore(embedder)
    store.load(io.StringIO(json.dumps(payload)))
    assert store.get("x").embedding == (1.0, 2.5, -3.0)


def test_load_replaces_existing_contents(store, embedder, tmp_path):
    other = SimpleVectorStore(embedder)
    other.add([Document(doc_id="new", content="n")])
    path = tmp_path / "s.json"
    other.save(path)

    store.add([Document(doc_id="old", content="o")])
    store.load(path)

    assert [e.doc_id for e in store.snapshot_entries()] == ["new"]


def test_save_overwrites_previous_file(store, tmp_path):
    path = tmp_path / "s.json"
    store.add([Document(doc_id="1", content="one")])
    store.save(path)
    store.delete(["1"])
    store.save(path)
    assert json.loads(path.read_text(encoding="utf-8")) == {}


class _BrokenStream:
    name = "broken-resource"

    def read(self):
        raise OSError("Resource not found")


def test_load_from_invalid_resource(store):
    with pytest.raises(IOFailure, match="Resource not found") as exc_info:
        store.load(_BrokenStream())
    assert exc_info.value.kind == "load"
    assert isinstance(exc_info.value.cause, OSError)
    assert exc_info.value.__cause__ is exc_info.value.cause


def test_load_missing_file(store, tmp_path):
    with pytest.raises(IOFailure) as exc_info:
        store.load(tmp_path / "missing.json")
    assert isinstance(exc_info.value.cause, FileNotFoundError)


@pytest.mark.parametrize(
    "text",
    [
        "{not json",
        "[1, 2, 3]",
        '{"a": "not an object"}',
        '{"a": {"metadata": {}, "embedding": [1.0]}}',
        '{"a": {"content": "c", "metadata": {}, "embedding": ["x"]}}',
        '{"a": {"content": "c", "metadata": [], "embedding": [1.0]}}',
    ],
)
def test_load_malformed_content(store, text):
    store.add([Document(doc_id="keep", content="k")])
    with pytest.raises(IOFailure) as exc_info:
        store.load(io.StringIO(text))
    assert str(exc_info.value.cause) in str(exc_info.value)
    # a failed load leaves the current contents in place
    assert store.count() == 1


def test_save_to_invalid_location(store, tmp_path):
    store.add([Document(doc_id="1", content="c")])
    with pytest.raises(IOFailure) as exc_info:
        store.save(tmp_path / "no-such-dir" / "file.json")
    assert exc_info.value.kind == "save"
    assert isinstance(exc_info.value.__cause__, OSError)
    assert not (tmp_path / "no-such-dir").exists()


def test_codec_round_trips_float_bits():
    values = (0.1, 1 / 3, -2.5e-310, 1e308, 123456789.123456789)
    entry = StoredEntry(doc_id="f", content="", metadata={}, embedding=values)
    (restored,) = json_codec.loads(json_codec.dumps([entry]))
    assert restored.embedding == values


def test_codec_sanitizes_non_json_metadata(tmp_path):
    entry = StoredEntry(doc_id="m", content="c", metadata={"tags": ("a", "b"), "path": tmp_path}, embedding=(1.0,))
    (restored,) = json_codec.loads(json_codec.dumps([entry]))
    assert restored.metadata == {"tags": ["a", "b"], "path": str(tmp_path)}


def test_concurrent_saves_to_same_path(store, embedder, tmp_path):
    store.add([Document(doc_id=f"id-{i}", content=f"content {i}", metadata={"i": i}) for i in range(300)])
    path = tmp_path / "s.json"
    errors: list[BaseException] = []

    def saver() -> None:
        try:
            for _ in range(20):
                store.save(path)
        except BaseException as e:
            errors.append(e)

    threads = [threading.Thread(target=saver) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert list(tmp_path.glob("*.tmp")) == []
    restored = SimpleVectorStore(embedder)
    restored.load(path)
    assert restored.snapshot_entries() == store.snapshot_entries()


def test_loaded_metadata_is_read_only(store, tmp_path):
    store.add([Document(doc_id="1", content="c", metadata={"k": "v"})])
    path = tmp_path / "s.json"
    store.save(path)
    store.load(path)
    with pytest.raises(TypeError):
        store.get("1").metadata["k"] = "changed"


def test_codec_stringifies_unknown_metadata_with_warning(caplog):
    class Opaque:
        def __str__(self) -> str:
            return "opaque!"

    entry = StoredEntry(doc_id="m", content="c", metadata={"obj": Opaque(), "n": 3}, embedding=(1.0,))
    with caplog.at_level(logging.WARNING, logger="memvec.utils.json_sanitize"):
        (restored,) = json_codec.loads(json_codec.dumps([entry]))

    assert restored.metadata == {"obj": "opaque!", "n": 3}
    assert "Opaque" in caplog.text
