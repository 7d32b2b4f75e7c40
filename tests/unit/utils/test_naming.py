"""Unit tests for functions defined in utils/naming module."""

from pytest_mock import MockerFixture

from utils.naming import clean_title, extract_chat_name, process_auto_naming


def test_extract_chat_name() -> None:
    """Test extraction of the title tag from the full response."""
    result = extract_chat_name(
        "Here is an outline...\n\n<name>Term Paper Outline</name>"
    )
    assert result is not None
    assert result.chat_name == "Term Paper Outline"
    assert result.cleaned_response == "Here is an outline..."


def test_extract_chat_name_case_insensitive_tag() -> None:
    """Test that the tag is matched regardless of case."""
    result = extract_chat_name("Answer <NAME>Tidal Locking</Name> text")
    assert result is not None
    assert result.chat_name == "Tidal Locking"
    assert result.cleaned_response == "Answer  text"


def test_extract_chat_name_without_tag() -> None:
    """Test responses without a usable title tag."""
    assert extract_chat_name("Just an answer") is None
    assert extract_chat_name("Unclosed <name>Title") is None
    assert extract_chat_name("Blank <name>   </name>") is None
    # the tag content must not span lines
    assert extract_chat_name("<name>Two\nLines</name>") is None


def test_clean_title_truncation() -> None:
    """Test that long titles are cut to 57 characters plus an ellipsis."""
    title = clean_title("A" * 80)
    assert len(title) == 60
    assert title == "A" * 57 + "..."

    assert clean_title("B" * 60) == "B" * 60


def test_clean_title_control_characters_and_whitespace() -> None:
    """Test that control characters are removed and spacing is collapsed."""
    assert clean_title("  Chemistry\x07   Homework\t Help  ") == "Chemistry Homework Help"
    assert clean_title("Lab\r\nReport") == "Lab Report"


def test_clean_title_length_is_measured_after_cleanup() -> None:
    """Test that spacing and control characters do not count toward the cap."""
    title = "Organic " + " " * 40 + "\x00" * 10 + "Chemistry Review Notes"
    assert clean_title(title) == "Organic Chemistry Review Notes"

    words = " ".join(["word"] * 20)
    title = clean_title(words.replace(" ", "   "))
    assert len(title) == 60
    assert title == words[:57] + "..."


def test_process_auto_naming_success(mocker: MockerFixture) -> None:
    """Test that an extracted title is persisted."""
    store = mocker.Mock()
    result = process_auto_naming(
        store, "user-1", "chat-1", "Here is an outline...\n\n<name>Term Paper Outline</name>"
    )
    assert result is not None
    assert result.chat_name == "Term Paper Outline"
    store.update_title.assert_called_once_with("user-1", "chat-1", "Term Paper Outline")
    store.mark_started.assert_not_called()


def test_process_auto_naming_without_title(mocker: MockerFixture) -> None:
    """Test that the conversation is marked as started when no title is found."""
    store = mocker.Mock()
    assert process_auto_naming(store, "user-1", "chat-1", "No tag here") is None
    store.update_title.assert_not_called()
    store.mark_started.assert_called_once_with("user-1", "chat-1")


def test_process_auto_naming_store_failure(mocker: MockerFixture) -> None:
    """Test that a persistence failure is logged and not propagated."""
    store = mocker.Mock()
    store.update_title.side_effect = RuntimeError("database is locked")

    assert process_auto_naming(store, "user-1", "chat-1", "<name>Title</name>") is None
    store.mark_started.assert_called_once_with("user-1", "chat-1")


def test_process_auto_naming_double_failure(mocker: MockerFixture) -> None:
    """Test that a failing fallback is swallowed as well."""
    store = mocker.Mock()
    store.update_title.side_effect = RuntimeError("database is locked")
    store.mark_started.side_effect = RuntimeError("database is locked")

    assert process_auto_naming(store, "user-1", "chat-1", "<name>Title</name>") is None
