"""Tests for extracting recommendation cards from streamed chat text."""

from app.models.chat import RecCard, RecSegment, TextSegment
from app.services.chat_parser import StreamedCardParser, parse_rec_card, parse_streamed_content


def test_parse_splits_text_and_cards() -> None:
    buffer = "intro [REC]Title###2020###tv###Because###ly[/REC] outro"

    parsed = parse_streamed_content(buffer)

    assert parsed.segments == [
        TextSegment(content="intro"),
        RecSegment(card=RecCard(title="Title", year="2020", type="tv", reason="Because###ly")),
    ]
    assert parsed.remainder == " outro"


def test_parse_fills_defaults_for_missing_fields() -> None:
    parsed = parse_streamed_content("[REC]OnlyTitle[/REC]")

    assert parsed.segments == [
        RecSegment(card=RecCard(title="OnlyTitle", year="N/A", type="movie", reason="Great pick!")),
    ]
    assert parsed.remainder == ""


def test_blank_fields_fall_back_to_defaults() -> None:
    card = parse_rec_card(" Akira ###  ### ANIME ###   ")

    assert card == RecCard(title="Akira", year="N/A", type="anime", reason="Great pick!")


def test_unknown_type_defaults_to_movie() -> None:
    assert parse_rec_card("Heat###1995###Film###Classic").type == "movie"
    assert parse_rec_card("Dark###2017###TV###Twisty").type == "tv"


def test_incomplete_block_stays_in_remainder() -> None:
    buffer = "text [REC]incomplete"

    parsed = parse_streamed_content(buffer)

    assert parsed.segments == []
    assert parsed.remainder == buffer


def test_no_markers_returns_untrimmed_buffer() -> None:
    buffer = "  Tell me more about what you like.\n"

    parsed = parse_streamed_content(buffer)

    assert parsed.segments == []
    assert parsed.remainder == buffer


def test_unterminated_block_after_complete_one() -> None:
    buffer = "[REC]A###2001###movie###x[/REC] and [REC]B###20"

    parsed = parse_streamed_content(buffer)

    assert [type(s) for s in parsed.segments] == [RecSegment]
    assert parsed.remainder == " and [REC]B###20"


def test_blocks_can_span_lines_and_blank_text_is_skipped() -> None:
    buffer = "[REC]A###2001###movie###line one\nline two[/REC]\n\n[REC]B###2002###tv###ok[/REC]"

    parsed = parse_streamed_content(buffer)

    assert len(parsed.segments) == 2
    assert parsed.segments[0].card.reason == "line one\nline two"
    assert parsed.segments[1].card.title == "B"


def test_reparsing_remainder_is_stable() -> None:
    buffers = [
        "intro [REC]Title###2020###tv###Because[/REC] outro [REC]Half",
        "no cards here",
        "[REC]x[/REC][REC]",
    ]
    for buffer in buffers:
        remainder = parse_streamed_content(buffer).remainder
        again = parse_streamed_content(remainder)
        assert again.segments == []
        assert again.remainder == remainder


def test_parse_is_deterministic_as_buffer_grows() -> None:
    full = "Try these: [REC]Up###2009###movie###Heartfelt[/REC] or [REC]Mushishi###2005###anime###Calm[/REC] Enjoy!"
    previous: list = []
    for end in range(len(full) + 1):
        segments = parse_streamed_content(full[:end]).segments
        # earlier segments never change once emitted
        assert segments[: len(previous)] == previous
        previous = segments
    assert len(previous) == 4


def _joined_text(frames) -> str:
    return "".join(frame.content for frame in frames if frame.kind == "text")


def test_streamed_parser_emits_frames_once() -> None:
    parser = StreamedCardParser()
    chunks = ["Here you go: [RE", "C]Up###2009###movie###", "Heartfelt[/REC] more", " text", ""]

    frames = []
    for chunk in chunks:
        frames.extend(parser.feed(chunk))
    frames.extend(parser.finish())

    assert [frame.kind for frame in frames] == ["text", "card", "text", "text"]
    assert frames[0].content == "Here you go:"
    assert frames[1].card == RecCard(title="Up", year="2009", type="movie", reason="Heartfelt")
    assert _joined_text(frames[2:]) == "more text"


def test_streamed_parser_forwards_plain_text_before_finish() -> None:
    parser = StreamedCardParser()
    chunks = ["Sure! ", "What kind of ", "movies do you ", "like?"]

    per_chunk = [parser.feed(chunk) for chunk in chunks]

    assert all(len(frames) == 1 for frames in per_chunk)
    streamed = [frame for frames in per_chunk for frame in frames]
    assert _joined_text(streamed) == "Sure! What kind of movies do you like?"
    assert parser.finish() == []


def test_streamed_parser_holds_back_partial_opener() -> None:
    parser = StreamedCardParser()

    frames = parser.feed("Look at this [R")
    assert [frame.content for frame in frames] == ["Look at this"]

    frames = parser.feed("EC]Up###2009###movie###Sweet[/REC]")
    assert [frame.kind for frame in frames] == ["card"]
    assert frames[0].card.title == "Up"


def test_streamed_parser_forwards_brackets_that_are_not_openers() -> None:
    parser = StreamedCardParser()

    frames = parser.feed("Rated [PG] by most")

    assert _joined_text(frames) == "Rated [PG] by most"


def test_streamed_parser_finish_keeps_unterminated_block_as_text() -> None:
    parser = StreamedCardParser()

    frames = parser.feed("Maybe [REC]Half")
    assert [frame.content for frame in frames] == ["Maybe"]

    frames = parser.finish()
    assert [frame.kind for frame in frames] == ["text"]
    assert frames[0].content == " [REC]Half"
