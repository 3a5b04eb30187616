from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.srs.factory import FlashcardFactory
from src.srs.models import Deck, GenerateRequest, TextSegment


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def segments() -> list[TextSegment]:
    return [
        TextSegment(id="seg-1", text="你好", pinyin="ni hao", tone_marks="nǐ hǎo", definition="hello"),
        TextSegment(id="seg-2", text="，", pinyin="", tone_marks=""),
        TextSegment(
            id="seg-3",
            text="学习",
            pinyin="xue xi",
            tone_marks="",
            definition="to study",
            example="我喜欢学习中文。",
            audio_url="audio/xuexi.mp3",
        ),
        TextSegment(id="seg-4", text="  ", pinyin="kong", tone_marks="kōng"),
        TextSegment(id="seg-5", text="中文", pinyin="zhong wen", tone_marks="zhōng wén"),
    ]


@pytest.fixture
def deck(segments: list[TextSegment], now: datetime) -> Deck:
    result = FlashcardFactory().generate(
        GenerateRequest(source_id="annotation-1", include_definitions=True),
        segments,
        now=now,
    )
    return result.unwrap().deck
