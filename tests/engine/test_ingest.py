from __future__ import annotations

from quote_keeper.engine.hashing import fingerprint
from quote_keeper.engine.ingest import IngestionEngine
from quote_keeper.engine.providers import ProviderChain, SeedProvider


def test_ingestion_appends_only_unknown_quotes(cycling_provider, fixed_clock) -> None:
    existing = ["alpha", "beta", "gamma"]
    provider = cycling_provider(existing + ["delta", "epsilon"])
    known = {fingerprint(text) for text in existing}
    engine = IngestionEngine(provider, offline=True, clock=fixed_clock)

    result = engine.ingest(2, known)

    assert result.appended == 2
    digests = [record.hash.removeprefix("sha256:") for record in result.records]
    assert len(set(digests)) == 2
    assert not set(digests) & known
    assert [record.text_original for record in result.records] == ["delta", "epsilon"]
    assert result.exhausted_slots == []


def test_ingestion_does_not_mutate_known_set(cycling_provider) -> None:
    known = {fingerprint("alpha")}
    engine = IngestionEngine(cycling_provider(["beta"]), offline=True)
    engine.ingest(1, known)
    assert known == {fingerprint("alpha")}


def test_ingestion_accepted_quotes_block_later_slots(cycling_provider) -> None:
    provider = cycling_provider(["Same quote", "same   QUOTE", "other"])
    engine = IngestionEngine(provider, offline=True)

    result = engine.ingest(2, set())

    assert [record.text_original for record in result.records] == ["Same quote", "other"]
    assert provider.calls == [(0, 0), (1, 0), (1, 1)]


def test_retry_exhaustion_skips_slot_without_crashing(cycling_provider) -> None:
    provider = cycling_provider(["known one", "known two"])
    known = {fingerprint("known one"), fingerprint("known two")}
    delays: list[float] = []
    engine = IngestionEngine(provider, max_retries=10, retry_delay=0.2, sleep=delays.append)

    result = engine.ingest(1, known)

    assert result.records == []
    assert result.exhausted_slots == [0]
    assert len(provider.calls) == 10
    assert delays == [0.2] * 10


def test_exhausted_slot_does_not_stop_following_slots(cycling_provider) -> None:
    provider = cycling_provider(["dup"] * 3 + ["fresh"])
    engine = IngestionEngine(provider, max_retries=3, offline=True)

    result = engine.ingest(2, {fingerprint("dup")})

    assert result.exhausted_slots == [0]
    assert [record.text_original for record in result.records] == ["fresh"]


def test_offline_mode_never_sleeps(cycling_provider) -> None:
    delays: list[float] = []
    engine = IngestionEngine(cycling_provider(["a"]), max_retries=4, offline=True, sleep=delays.append)
    engine.ingest(1, {fingerprint("a")})
    assert delays == []


def test_missing_candidate_aborts_slot_early(cycling_provider) -> None:
    provider = cycling_provider([])
    engine = IngestionEngine(provider, offline=True)

    result = engine.ingest(3, set())

    assert result.records == []
    assert result.empty_slots == [0, 1, 2]
    assert result.exhausted_slots == []
    assert provider.calls == [(0, 0), (1, 0), (2, 0)]


def test_seed_walk_uses_slot_plus_attempt(seed_catalog, seed_entries) -> None:
    known = {fingerprint(seed_entries[1]["text_original"])}
    engine = IngestionEngine(ProviderChain([SeedProvider(seed_catalog)]), offline=True)

    result = engine.ingest(2, known)

    # slot 0 -> index 0; slot 1 -> index 1 (known) then index 2
    assert [record.text_original for record in result.records] == [
        seed_entries[0]["text_original"],
        seed_entries[2]["text_original"],
    ]


def test_records_carry_id_timestamp_and_hash(cycling_provider, fixed_clock) -> None:
    engine = IngestionEngine(cycling_provider(["  Hello   World "]), offline=True, clock=fixed_clock)

    record = engine.ingest(1).records[0]
    digest = fingerprint("hello world")

    assert record.id == f"2024-05-17_{digest[:10]}"
    assert record.fetched_at == "2024-05-17T08:30:15.123Z"
    assert record.hash == f"sha256:{digest}"
    assert record.text_original == "  Hello   World "
    assert record.language == "en"
    assert record.tags == []
    assert list(record.to_dict()) == [
        "id",
        "text_original",
        "author",
        "source_name",
        "source_url",
        "language",
        "tags",
        "fetched_at",
        "hash",
    ]
