"""Tests for the save watcher that drives compile-on-save."""
import pytest
from unittest.mock import MagicMock
from watchdog.events import FileModifiedEvent, FileMovedEvent, DirModifiedEvent

from cplebolt.utils.watcher import FileWatcher, SaveHandler


@pytest.fixture
def target(tmp_path):
    path = tmp_path / "hello.cple"
    path.write_text("")
    return path


class TestSaveHandler:

    def test_modified_target_triggers(self, target):
        callback = MagicMock()
        handler = SaveHandler(str(target), callback)
        handler.on_modified(FileModifiedEvent(str(target)))
        callback.assert_called_once_with(str(target.resolve()))

    def test_other_file_ignored(self, target, tmp_path):
        callback = MagicMock()
        handler = SaveHandler(str(target), callback)
        handler.on_modified(FileModifiedEvent(str(tmp_path / "other.cple")))
        callback.assert_not_called()

    def test_directory_event_ignored(self, target, tmp_path):
        callback = MagicMock()
        handler = SaveHandler(str(target), callback)
        handler.on_modified(DirModifiedEvent(str(tmp_path)))
        callback.assert_not_called()

    def test_debounce(self, target):
        callback = MagicMock()
        handler = SaveHandler(str(target), callback)
        handler.on_modified(FileModifiedEvent(str(target)))
        handler.on_modified(FileModifiedEvent(str(target)))
        assert callback.call_count == 1

    def test_atomic_rename_triggers(self, target, tmp_path):
        callback = MagicMock()
        handler = SaveHandler(str(target), callback)
        handler.on_moved(FileMovedEvent(str(tmp_path / ".hello.cple.swp"), str(target)))
        callback.assert_called_once()


class TestFileWatcher:

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FileWatcher().start_watching(str(tmp_path / "nope.cple"), lambda p: None)

    def test_start_and_stop(self, target):
        watcher = FileWatcher()
        watcher.start_watching(str(target), lambda p: None)
        assert watcher.observer.is_alive()
        watcher.stop_watching()
        assert not watcher.observer.is_alive()

    def test_stop_without_start(self):
        FileWatcher().stop_watching()
