"""Tests for the hybrid ranker."""

import math

import pytest

from service_search.hybrid.ranker import MODE_BROWSE, MODE_LEXICAL, MODE_SEMANTIC, HybridRanker
from service_search.models import SearchQuery
from tests.conftest import StaticEmbed, make_item


def unit_at(cos: float):
    """A unit vector whose cosine with [1, 0] is ``cos``."""
    return (cos, math.sqrt(1.0 - cos * cos))


QUERY_VECTOR = [1.0, 0.0]


@pytest.mark.asyncio
async def test_lexical_fallback_prefers_exact_word_match():
    corpus = [
        make_item("2", "Need an easy meal to cook"),
        make_item("1", "Looking for a new game to play"),
    ]
    ranker = HybridRanker(embed=StaticEmbed())

    results, mode = await ranker.rank_detailed(SearchQuery(raw="game"), corpus)

    assert mode == MODE_LEXICAL
    assert [r.item.id for r in results] == ["1", "2"]
    assert results[0].similarity > results[1].similarity


@pytest.mark.asyncio
async def test_lexical_fallback_keeps_non_matching_items():
    corpus = [make_item("1", "Looking for a new game to play"), make_item("2", "xyz")]
    results = await HybridRanker(embed=StaticEmbed()).rank(SearchQuery(raw="game"), corpus)

    assert len(results) == 2
    assert results[1].similarity == 0.0


@pytest.mark.asyncio
async def test_lexical_score_is_weighted_blend():
    corpus = [make_item("1", "game")]
    results = await HybridRanker(embed=StaticEmbed()).rank(SearchQuery(raw="game"), corpus)

    # full word overlap and identical strings
    assert results[0].similarity == pytest.approx(1.0)

    ranker = HybridRanker(embed=StaticEmbed(), word_overlap_weight=1.0, lexical_weight=0.0)
    results = await ranker.rank(SearchQuery(raw="game night"), corpus)
    assert results[0].similarity == pytest.approx(0.5)


@pytest.mark.asyncio
async def test_lexical_scores_stay_in_unit_interval():
    corpus = [make_item("1", "game"), make_item("2", "game night"), make_item("3", "cook")]
    ranker = HybridRanker(embed=StaticEmbed(), word_overlap_weight=0.5, lexical_weight=0.5)

    for result in await ranker.rank(SearchQuery(raw="game"), corpus):
        assert 0.0 <= result.similarity <= 1.0


@pytest.mark.parametrize("word_weight,lexical_weight", [(1.0, 1.0), (0.8, 0.3), (-0.5, 0.2)])
def test_weights_must_not_sum_past_one(word_weight, lexical_weight):
    with pytest.raises(ValueError):
        HybridRanker(embed=StaticEmbed(), word_overlap_weight=word_weight, lexical_weight=lexical_weight)


@pytest.mark.asyncio
async def test_semantic_threshold_excludes_low_scores():
    corpus = [
        make_item("low", "Looking for a game", embedding=unit_at(0.1)),
        make_item("mid", "Something else", embedding=unit_at(0.40)),
        make_item("high", "Unrelated words", embedding=unit_at(0.95)),
    ]
    embed = StaticEmbed(default=QUERY_VECTOR)

    results, mode = await HybridRanker(embed=embed).rank_detailed(SearchQuery(raw="game"), corpus)

    assert mode == MODE_SEMANTIC
    assert [r.item.id for r in results] == ["high", "mid"]
    assert results[0].similarity == pytest.approx(0.95)
    assert results[1].similarity == pytest.approx(0.40)


@pytest.mark.asyncio
async def test_semantic_scores_are_not_blended_with_lexical():
    corpus = [
        make_item("1", "game", embedding=unit_at(0.5)),
        make_item("2", "cooking", embedding=unit_at(0.6)),
    ]
    results = await HybridRanker(embed=StaticEmbed(default=QUERY_VECTOR)).rank(
        SearchQuery(raw="game"), corpus
    )

    assert [r.item.id for r in results] == ["2", "1"]
    assert results[1].similarity == pytest.approx(0.5)


@pytest.mark.asyncio
async def test_items_without_embeddings_score_zero_on_semantic_path():
    corpus = [
        make_item("1", "game"),
        make_item("2", "cooking", embedding=unit_at(0.9)),
    ]
    results = await HybridRanker(embed=StaticEmbed(default=QUERY_VECTOR)).rank(
        SearchQuery(raw="game"), corpus, threshold=0.0
    )

    assert [r.item.id for r in results] == ["2", "1"]
    assert results[1].similarity == 0.0


@pytest.mark.asyncio
async def test_falls_back_to_lexical_when_nothing_clears_threshold():
    corpus = [
        make_item("1", "Looking for a new game to play", embedding=unit_at(0.1)),
        make_item("2", "Need an easy meal to cook", embedding=unit_at(0.2)),
    ]
    results, mode = await HybridRanker(embed=StaticEmbed(default=QUERY_VECTOR)).rank_detailed(
        SearchQuery(raw="game"), corpus
    )

    assert mode == MODE_LEXICAL
    assert [r.item.id for r in results] == ["1", "2"]


@pytest.mark.asyncio
async def test_embed_failure_falls_back_to_lexical():
    async def broken_embed(text):
        raise RuntimeError("provider down")

    corpus = [make_item("1", "cook dinner"), make_item("2", "play a game")]
    results, mode = await HybridRanker(embed=broken_embed).rank_detailed(
        SearchQuery(raw="game"), corpus
    )

    assert mode == MODE_LEXICAL
    assert results[0].item.id == "2"


@pytest.mark.asyncio
async def test_ties_keep_corpus_order():
    corpus = [make_item(str(i), "same text") for i in range(5)]
    ranker = HybridRanker(embed=StaticEmbed())

    first = await ranker.rank(SearchQuery(raw="same"), corpus)
    second = await ranker.rank(SearchQuery(raw="same"), corpus)

    assert [r.item.id for r in first] == ["0", "1", "2", "3", "4"]
    assert [r.item.id for r in first] == [r.item.id for r in second]


@pytest.mark.asyncio
async def test_semantic_ties_keep_corpus_order():
    corpus = [make_item(str(i), "t", embedding=unit_at(0.8)) for i in range(3)]
    results = await HybridRanker(embed=StaticEmbed(default=QUERY_VECTOR)).rank(
        SearchQuery(raw="q"), corpus
    )
    assert [r.item.id for r in results] == ["0", "1", "2"]


@pytest.mark.asyncio
async def test_results_capped_at_max_candidates():
    corpus = [make_item(str(i), f"game number {i}") for i in range(25)]
    ranker = HybridRanker(embed=StaticEmbed())

    assert len(await ranker.rank(SearchQuery(raw="game"), corpus)) == 10
    assert len(await ranker.rank(SearchQuery(raw="game"), corpus, max_candidates=3)) == 3


@pytest.mark.asyncio
async def test_blank_query_browses_without_embedding(seed_corpus):
    embed = StaticEmbed(default=QUERY_VECTOR)
    ranker = HybridRanker(embed=embed)

    for raw in ("", "   ", "\x00"):
        results, mode = await ranker.rank_detailed(SearchQuery(raw=raw), seed_corpus)
        assert mode == MODE_BROWSE
        assert [r.item.id for r in results] == [item.id for item in seed_corpus]
        assert all(r.similarity is None for r in results)

    assert embed.calls == []


@pytest.mark.asyncio
async def test_query_is_normalized_before_embedding():
    embed = StaticEmbed()
    await HybridRanker(embed=embed).rank(SearchQuery(raw="  Board\tGAMES "), [make_item("1", "x")])
    assert embed.calls == ["board games"]


@pytest.mark.asyncio
async def test_empty_corpus():
    results = await HybridRanker(embed=StaticEmbed(default=QUERY_VECTOR)).rank(
        SearchQuery(raw="game"), []
    )
    assert results == []
