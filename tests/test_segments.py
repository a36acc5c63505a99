from livetrans.realtime.segments import Channel, ItemState, SegmentStore


def test_upsert_appends_and_trims() -> None:
    store = SegmentStore(Channel.SOURCE)
    seg = store.upsert("a", "  Hallo  ", is_partial=True)
    assert seg is not None
    assert seg.text == "Hallo"
    assert [s.id for s in store.segments] == ["a"]
    assert store.state("a") == ItemState.ACCUMULATING


def test_upsert_empty_text_is_noop() -> None:
    store = SegmentStore(Channel.SOURCE)
    store.upsert("a", "Hallo", is_partial=True)
    before = store.segments

    assert store.upsert("a", "   ", is_partial=False) is None
    assert store.upsert("b", "", is_partial=True) is None
    assert store.segments == before
    assert store.state("b") == ItemState.ABSENT
    assert not store.is_finalized("a")


def test_upsert_preserves_first_appearance_order() -> None:
    store = SegmentStore(Channel.TARGET)
    store.upsert("a", "one", is_partial=True)
    store.upsert("b", "two", is_partial=True)
    store.upsert("a", "one more", is_partial=False, timestamp="0:03")

    assert [s.id for s in store.segments] == ["a", "b"]
    first = store.get("a")
    assert first.text == "one more"
    assert first.is_partial is False
    assert first.timestamp == "0:03"


def test_finalized_segment_is_immutable() -> None:
    store = SegmentStore(Channel.SOURCE)
    store.upsert("u2", "Yes", is_partial=False, timestamp="0:01")

    assert store.upsert("u2", "No", is_partial=False) is None
    assert store.upsert("u2", "No", is_partial=True) is None
    assert store.get("u2").text == "Yes"
    assert store.state("u2") == ItemState.FINALIZED


def test_generated_ids_are_channel_scoped() -> None:
    store = SegmentStore(Channel.TARGET)
    first = store.upsert(None, "x", is_partial=False)
    second = store.upsert(None, "y", is_partial=False)
    assert first.id == "target-1"
    assert second.id == "target-2"
    assert len(store) == 2


def test_full_text_joins_finals_only() -> None:
    store = SegmentStore(Channel.SOURCE)
    store.upsert("a", "Goedemorgen", is_partial=False)
    store.upsert("b", "hoe gaat", is_partial=True)
    store.upsert("c", "Tot ziens", is_partial=False)
    assert store.full_text() == "Goedemorgen Tot ziens"


def test_clear_resets_everything() -> None:
    store = SegmentStore(Channel.SOURCE)
    store.upsert("a", "x", is_partial=False)
    store.upsert(None, "y", is_partial=True)
    store.clear()

    assert store.segments == []
    assert store.state("a") == ItemState.ABSENT
    assert store.upsert("a", "again", is_partial=False) is not None
    assert store.upsert(None, "z", is_partial=True).id == "source-1"


def test_segment_to_dict() -> None:
    store = SegmentStore(Channel.SOURCE)
    seg = store.upsert("a", "Hallo", is_partial=False, timestamp="1:05")
    assert seg.to_dict() == {
        "id": "a",
        "text": "Hallo",
        "is_partial": False,
        "timestamp": "1:05",
    }
