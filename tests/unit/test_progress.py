from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock, patch

from xlsxrows.services.progress import ProgressTracker, is_tty_enabled


def test_is_tty_enabled_returns_stdout_isatty():
    with patch("sys.stdout.isatty", return_value=True):
        assert is_tty_enabled() is True

    with patch("sys.stdout.isatty", return_value=False):
        assert is_tty_enabled() is False


class TestProgressTracker:
    """Test cases for ProgressTracker class."""

    def test_init_with_tty_enabled(self):
        with patch("xlsxrows.services.progress.is_tty_enabled", return_value=True), \
             patch("xlsxrows.services.progress.tqdm") as mock_tqdm:

            tracker = ProgressTracker(5, description="Test files")

            assert tracker.enabled is True
            mock_tqdm.assert_called_once_with(
                total=5,
                desc="Test files",
                unit="file",
                leave=True,
                ncols=80,
                ascii=True,
            )

    def test_init_with_tty_disabled(self):
        with patch("xlsxrows.services.progress.is_tty_enabled", return_value=False):
            tracker = ProgressTracker(5)

            assert tracker.total_files == 5
            assert tracker.description == "Parsing files"
            assert tracker.current_file == 0
            assert tracker.enabled is False
            assert tracker.pbar is None

    def test_start_and_finish_file(self):
        mock_pbar = Mock()

        with patch("xlsxrows.services.progress.is_tty_enabled", return_value=True), \
             patch("xlsxrows.services.progress.tqdm", return_value=mock_pbar):

            tracker = ProgressTracker(3, description="Parsing")
            tracker.start_file(Path("data/book.xlsx"))
            tracker.finish_file(rows=9)

            assert tracker.current_file == 1
            mock_pbar.update.assert_called_once_with(1)
            mock_pbar.set_postfix.assert_called_once_with(rows=9)
            assert mock_pbar.set_description.call_args_list[0].args == ("Parsing (book.xlsx)",)
            assert mock_pbar.set_description.call_args_list[-1].args == ("Parsing",)

    def test_tty_disabled_calls_are_noops(self):
        with patch("xlsxrows.services.progress.is_tty_enabled", return_value=False):
            tracker = ProgressTracker(2)
            tracker.start_file(Path("a.xlsx"))
            tracker.finish_file(rows=3)
            tracker.close()
            assert tracker.current_file == 1

    def test_context_manager_closes(self):
        mock_pbar = Mock()

        with patch("xlsxrows.services.progress.is_tty_enabled", return_value=True), \
             patch("xlsxrows.services.progress.tqdm", return_value=mock_pbar):

            with ProgressTracker(3) as tracker:
                assert isinstance(tracker, ProgressTracker)

            mock_pbar.close.assert_called_once()
            assert tracker.pbar is None
