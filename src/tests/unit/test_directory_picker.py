"""Tests for the directory picker state machine."""

import pytest

from noted.core.errors import InputValidationError
from noted.core.paths import expand_path
from noted.tui.directory_picker import (
    DirectoryPicker,
    PickerResult,
    PickerState,
    parse_path_input,
)


@pytest.fixture
def picker(home):
    """Picker rooted at the fake home directory."""
    return DirectoryPicker()


class TestInitialState:
    """Tests for a freshly created picker."""

    def test_lists_home_subdirectories(self, picker, home):
        """Empty input shows the unfiltered home listing."""
        assert picker.root == str(home)
        assert picker.candidates == [
            str(home / "Documents"),
            str(home / "Downloads"),
            str(home / "archive"),
            str(home / "projects"),
        ]
        assert picker.highlighted == 0
        assert picker.state is PickerState.BROWSING
        assert picker.result is None

    def test_custom_root(self, tmp_path):
        """An explicit root is listed instead of home."""
        (tmp_path / "a").mkdir()

        picker = DirectoryPicker(root=str(tmp_path))

        assert picker.candidates == [str(tmp_path / "a")]


class TestFiltering:
    """Tests for type-ahead filtering."""

    def test_prefix_filters_parent_listing(self, picker, home, press):
        """Typing ~/Do keeps only matching subdirectories of home."""
        press(picker, "~/Do")

        assert picker.candidates == [str(home / "Documents"), str(home / "Downloads")]

    def test_unknown_path_becomes_literal_candidate(self, picker, home, press):
        """No match offers the expanded typed path itself."""
        press(picker, "~/notes")

        assert picker.candidates == [str(home / "notes")]

    def test_existing_sibling_with_prefix_is_offered(self, home, press):
        """A directory extending the typed path wins over the literal path."""
        (home / "notes-2024").mkdir()
        picker = DirectoryPicker()

        press(picker, "~/notes", "enter")

        assert picker.candidates == [str(home / "notes-2024")]
        assert picker.result == PickerResult(path=str(home / "notes-2024"))

    def test_absolute_prefix(self, picker, home, press):
        """Absolute paths filter the same way."""
        press(picker, str(home / "pro"))

        assert picker.candidates == [str(home / "projects")]

    @pytest.mark.parametrize(
        "typed", ["~", "~/", "~/D", "~/Documents", "~/n", "~/zzz", "/", "rel", "~/file"]
    )
    def test_candidates_start_with_expanded_prefix(self, picker, press, typed):
        """Every candidate starts with the expanded input, or is exactly it."""
        press(picker, typed)
        base = expand_path(typed)

        assert picker.candidates
        if picker.candidates == [base]:
            return
        assert all(c.startswith(base) for c in picker.candidates)

    def test_backspace_to_empty_restores_root_listing(self, picker, press):
        """Deleting all input brings the full listing back."""
        initial = list(picker.candidates)
        press(picker, "~/Do", "backspace", "backspace", "backspace", "backspace")

        assert picker.input_text == ""
        assert picker.candidates == initial

    def test_typing_clears_error(self, tmp_path, press):
        """Editing the input clears a previous validation error."""
        picker = DirectoryPicker(root=str(tmp_path))
        press(picker, "enter")
        assert picker.error

        press(picker, "x")

        assert picker.error == ""


class TestNavigation:
    """Tests for highlight movement and clamping."""

    def test_down_and_up_clamp(self, picker, press):
        """The highlight never leaves the candidate range."""
        press(picker, *["down"] * 10)
        assert picker.highlighted == len(picker.candidates) - 1

        press(picker, *["up"] * 10)
        assert picker.highlighted == 0

    def test_refilter_reclamps(self, picker, home, press):
        """Shrinking the candidate list pulls the highlight back in range."""
        press(picker, "down", "down", "down")
        assert picker.highlighted == 3

        press(picker, "~/Doc")

        assert picker.candidates == [str(home / "Documents")]
        assert picker.highlighted == 0

    @pytest.mark.parametrize(
        "sequence",
        [
            ["down", "down", "~/D", "down", "backspace", "up"],
            ["~/zz", "down", "up", "backspace", "backspace", "backspace", "down"],
            ["down"] * 5 + ["~/p"] + ["up"] * 3,
        ],
    )
    def test_highlight_stays_in_range(self, picker, press, sequence):
        """Any mix of navigation and typing keeps the index valid."""
        for step in sequence:
            press(picker, step)
            if picker.candidates:
                assert 0 <= picker.highlighted < len(picker.candidates)


class TestResolution:
    """Tests for confirm and cancel."""

    def test_enter_resolves_highlighted(self, picker, home, press):
        """Enter picks the highlighted candidate."""
        press(picker, "down", "enter")

        assert picker.done
        assert picker.result == PickerResult(path=str(home / "Downloads"))

    def test_enter_resolves_literal_path(self, picker, home, press):
        """A typed path that doesn't exist yet can be chosen."""
        press(picker, "~/notes", "enter")

        assert picker.result == PickerResult(path=str(home / "notes"))

    def test_empty_input_without_candidates_is_rejected(self, tmp_path, press):
        """With nothing listed and nothing typed, enter reports an error."""
        picker = DirectoryPicker(root=str(tmp_path))
        assert picker.candidates == []

        press(picker, "enter")

        assert not picker.done
        assert picker.error == "Path cannot be empty."
        assert "✗ Path cannot be empty." in picker.view()

    def test_esc_cancels(self, picker, press):
        """Esc resolves with the cancellation flag."""
        press(picker, "~/Do", "esc")

        assert picker.done
        assert picker.result == PickerResult(cancelled=True)

    def test_keys_after_resolution_are_ignored(self, picker, press):
        """A resolved picker no longer changes."""
        press(picker, "esc", "~/Do", "enter")

        assert picker.result.cancelled
        assert picker.input_text == ""

    def test_q_is_typed_not_cancel(self, picker, press):
        """Only esc cancels; q is ordinary path input."""
        press(picker, "q")

        assert not picker.done
        assert picker.input_text == "q"


class TestView:
    """Tests for the plain-text view."""

    def test_view_marks_highlight(self, picker, home, press):
        press(picker, "down")
        view = picker.view()

        assert "Select or enter a directory:" in view
        assert f"> {home / 'Downloads'}" in view
        assert f"  {home / 'Documents'}" in view

    def test_view_shows_placeholder(self, picker):
        assert "> ~/Documents" in picker.view()

    def test_visible_window_follows_highlight(self, tmp_path, press):
        for i in range(15):
            (tmp_path / f"d{i:02d}").mkdir()
        picker = DirectoryPicker(root=str(tmp_path))

        press(picker, *["down"] * 12)
        indices = [i for i, _ in picker.visible_candidates()]

        assert 12 in indices
        assert len(indices) == 10


class TestParsePathInput:
    """Tests for parse_path_input()."""

    def test_expands(self, home):
        assert parse_path_input("~/notes") == str(home / "notes")

    @pytest.mark.parametrize("text", ["", "   "])
    def test_rejects_empty(self, text):
        with pytest.raises(InputValidationError, match="cannot be empty"):
            parse_path_input(text)
