from __future__ import annotations

from datetime import datetime, timedelta

from src.srs.errors import ErrorKind
from src.srs.factory import FlashcardFactory, is_eligible
from src.srs.models import Difficulty, GenerateRequest, SourceText, TextSegment


def test_generate_builds_cards_from_eligible_segments(segments, now: datetime) -> None:
    result = FlashcardFactory().generate(
        GenerateRequest(source_id="annotation-1"), segments, now=now
    )

    assert result.ok
    deck = result.value.deck
    assert [card.front for card in deck] == ["你好", "学习", "中文"]
    assert [card.source_segment_id for card in deck] == ["seg-1", "seg-3", "seg-5"]
    assert deck.metadata.card_count == 3
    assert deck.source_id == "annotation-1"
    assert deck.source_type == "annotation"
    assert deck.created_at == now
    assert result.value.generation_time_ms >= 0

    for card in deck:
        assert card.created_at == now
        assert card.scheduling.interval == 1
        assert card.scheduling.repetition_count == 0
        assert card.scheduling.ease_factor == 2.5
        assert card.scheduling.due_date == now + timedelta(days=1)
        assert card.scheduling.total_reviews == 0
        assert card.scheduling.last_reviewed_at is None
        assert {"vocabulary", "auto-generated"} <= card.tags


def test_generate_prefers_tone_marks(segments, now: datetime) -> None:
    deck = FlashcardFactory().generate(
        GenerateRequest(source_id="annotation-1"), segments, now=now
    ).unwrap().deck

    assert [card.back.pinyin for card in deck] == ["nǐ hǎo", "xue xi", "zhōng wén"]
    assert deck.cards[1].back.audio_url == "audio/xuexi.mp3"


def test_optional_fields_are_omitted_without_flags(segments, now: datetime) -> None:
    deck = FlashcardFactory().generate(
        GenerateRequest(source_id="annotation-1"), segments, now=now
    ).unwrap().deck

    assert all(card.back.definition is None for card in deck)
    assert all(card.back.example is None for card in deck)


def test_flags_populate_definitions_and_examples(segments, now: datetime) -> None:
    deck = FlashcardFactory().generate(
        GenerateRequest(source_id="annotation-1", include_definitions=True, include_examples=True),
        segments,
        now=now,
    ).unwrap().deck

    first, second, third = deck.cards
    assert first.back.definition == "hello"
    assert second.back.definition == "to study"
    assert third.back.definition is None
    assert second.back.example == "我喜欢学习中文。"
    assert first.back.example == "Example usage of 你好"


def test_card_limit_keeps_insertion_order(segments, now: datetime) -> None:
    deck = FlashcardFactory().generate(
        GenerateRequest(source_id="annotation-1", card_limit=2), segments, now=now
    ).unwrap().deck

    assert [card.front for card in deck] == ["你好", "学习"]


def test_default_limit_applies_without_card_limit(now: datetime) -> None:
    many = [
        TextSegment(id=f"seg-{index}", text=f"字{index}", pinyin=f"zi{index}")
        for index in range(30)
    ]
    deck = FlashcardFactory(default_card_limit=20).generate(
        GenerateRequest(source_id="annotation-1"), many, now=now
    ).unwrap().deck

    assert len(deck) == 20
    assert deck.cards[0].front == "字0"
    assert deck.cards[-1].front == "字19"


def test_zero_card_limit_is_rejected(segments, now: datetime) -> None:
    result = FlashcardFactory().generate(
        GenerateRequest(source_id="annotation-1", card_limit=0), segments, now=now
    )

    assert not result.ok
    assert result.error.kind is ErrorKind.VALIDATION
    assert result.error.code == "invalid_card_limit"
    assert "between 1 and 100" in result.error.message


def test_card_limit_above_maximum_is_rejected(segments, now: datetime) -> None:
    result = FlashcardFactory().generate(
        GenerateRequest(source_id="annotation-1", card_limit=101), segments, now=now
    )

    assert result.error.kind is ErrorKind.VALIDATION


def test_missing_source_id_is_rejected(segments, now: datetime) -> None:
    result = FlashcardFactory().generate(GenerateRequest(source_id="  "), segments, now=now)

    assert result.error.kind is ErrorKind.VALIDATION
    assert result.error.code == "missing_source_id"


def test_no_eligible_segments_fails(now: datetime) -> None:
    result = FlashcardFactory().generate(
        GenerateRequest(source_id="annotation-1"),
        [TextSegment(id="seg-1", text="。"), TextSegment(id="seg-2", text="", pinyin="a")],
        now=now,
    )

    assert result.error.kind is ErrorKind.EMPTY_INPUT
    assert result.error.code == "no_eligible_content"


def test_deck_metadata_uses_source_details(segments, now: datetime) -> None:
    source = SourceText(
        id="annotation-1",
        original_text="你好，学习中文" * 10,
        segments=segments,
        difficulty=Difficulty.BEGINNER,
    )
    deck = FlashcardFactory().generate(
        GenerateRequest(source_id="annotation-1", tags=["hsk1"]),
        segments,
        source=source,
        now=now,
    ).unwrap().deck

    assert deck.name.startswith("Flashcards from 你好，学习中文")
    assert deck.name.endswith("...")
    assert deck.metadata.difficulty is Difficulty.BEGINNER
    assert deck.metadata.tags == ("hsk1",)
    assert all("hsk1" in card.tags for card in deck)


def test_request_difficulty_overrides_source(segments, now: datetime) -> None:
    source = SourceText(
        id="annotation-1",
        original_text="你好",
        segments=segments,
        title="Greetings",
        difficulty=Difficulty.BEGINNER,
    )
    deck = FlashcardFactory().generate(
        GenerateRequest(source_id="annotation-1", difficulty=Difficulty.ADVANCED),
        segments,
        source=source,
        now=now,
    ).unwrap().deck

    assert deck.name == "Flashcards from Greetings"
    assert deck.metadata.difficulty is Difficulty.ADVANCED
    assert deck.metadata.tags == ("vocabulary", "auto-generated")


def test_generated_ids_are_unique(segments, now: datetime) -> None:
    factory = FlashcardFactory()
    first = factory.generate(GenerateRequest(source_id="a"), segments, now=now).unwrap().deck
    second = factory.generate(GenerateRequest(source_id="a"), segments, now=now).unwrap().deck

    assert first.id != second.id
    ids = [card.id for card in first] + [card.id for card in second]
    assert len(set(ids)) == len(ids)


def test_is_eligible_requires_text_and_phonetics() -> None:
    assert is_eligible(TextSegment(id="1", text="好", tone_marks="hǎo"))
    assert not is_eligible(TextSegment(id="2", text="好"))
    assert not is_eligible(TextSegment(id="3", text=" ", pinyin="hao"))
