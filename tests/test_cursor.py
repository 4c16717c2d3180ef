import pytest
from pollrelay import LATEST_OFFSET, Cursor, Update


def test_new_cursor_starts_at_zero() -> None:
    assert Cursor().offset == 0


@pytest.mark.parametrize(
    ("start", "update_id", "expected_offset", "moved"),
    [
        (0, 101, 102, True),
        (102, 102, 103, True),
        (103, 102, 103, False),
        (500, 7, 500, False),
    ],
)
def test_advance_never_moves_backwards(
    start: int, update_id: int, expected_offset: int, moved: bool
) -> None:
    """Test that the offset moves to one past the update, and only ever forwards."""
    # arrange
    cursor = Cursor(start)

    # act
    result = cursor.advance(update_id)

    # assert
    assert result is moved
    assert cursor.offset == expected_offset


def test_latest_offset_is_negative() -> None:
    assert LATEST_OFFSET == -1


def test_summary_describes_text_message() -> None:
    # arrange
    update = Update(
        101,
        {
            "update_id": 101,
            "message": {"text": "hello", "from": {"first_name": "Ada"}, "chat": {"id": 42}},
        },
    )

    # act & assert
    assert update.summary() == 'Message from Ada (chat:42): "hello"'


def test_summary_falls_back_to_unknown_sender() -> None:
    update = Update(5, {"update_id": 5, "message": {"text": "hi", "chat": {"id": 7}}})

    assert update.summary() == 'Message from Unknown (chat:7): "hi"'


@pytest.mark.parametrize(
    "payload",
    [
        {"update_id": 1},
        {"update_id": 1, "message": {"photo": [], "chat": {"id": 7}}},
        {"update_id": 1, "callback_query": {"data": "x"}},
    ],
)
def test_summary_is_none_for_updates_without_text(payload: dict) -> None:
    assert Update(1, payload).summary() is None
