"""Tests for the InputDispatcher state machine."""

import signal

import pytest

from proctop.dispatch import InputDispatcher
from proctop.models import Focus, Process
from proctop.selection import ProcessListModel, SignalMenuModel
from proctop.signals import SIGNAL_CATALOG


class RecordingSender:
    """Signal sender that records calls instead of delivering them."""

    def __init__(self):
        self.sent: list[tuple[int, int]] = []

    def send(self, pid: int, code: int) -> None:
        self.sent.append((pid, code))


def make_dispatcher(count: int = 5):
    processes = ProcessListModel(
        [Process(pid=100 + i, command_line=f"proc {i}") for i in range(count)]
    )
    sender = RecordingSender()
    return InputDispatcher(processes, SignalMenuModel(), sender), sender


def press(dispatcher: InputDispatcher, keys: bytes) -> None:
    for key in keys:
        dispatcher.dispatch(bytes([key]))


class TestUniversalKeys:
    """Tests for keys that work in every focus."""

    @pytest.mark.parametrize("key", [b"q", b"Q", b"\x03"])
    @pytest.mark.parametrize("focus", list(Focus))
    def test_quit_keys_stop_loop(self, key, focus):
        """Test q, Q and Ctrl-C stop the loop regardless of focus."""
        dispatcher, _ = make_dispatcher()
        dispatcher.focus = focus

        dispatcher.dispatch(key)

        assert dispatcher.running is False
        assert dispatcher.interrupted is (key == b"\x03")

    def test_empty_input_is_noop(self):
        """Test a read timeout changes nothing."""
        dispatcher, sender = make_dispatcher()

        dispatcher.dispatch(b"")

        assert dispatcher.running is True
        assert dispatcher.focus is Focus.PROCESS
        assert dispatcher.processes.selected_offset == 0
        assert sender.sent == []

    def test_unknown_key_is_noop(self):
        """Test unbound keys are ignored."""
        dispatcher, sender = make_dispatcher()

        press(dispatcher, b"xz9")

        assert dispatcher.running is True
        assert dispatcher.focus is Focus.PROCESS
        assert sender.sent == []


class TestProcessFocus:
    """Tests for key handling while the process list has focus."""

    def test_initial_state(self):
        """Test the dispatcher starts on the process list with help shown."""
        dispatcher, _ = make_dispatcher()

        assert dispatcher.focus is Focus.PROCESS
        assert dispatcher.show_help is True
        assert dispatcher.running is True

    @pytest.mark.parametrize("key", [b"h", b"H"])
    def test_toggle_help(self, key):
        """Test h toggles the help block."""
        dispatcher, _ = make_dispatcher()

        dispatcher.dispatch(key)
        assert dispatcher.show_help is False

        dispatcher.dispatch(key)
        assert dispatcher.show_help is True

    def test_navigation(self):
        """Test j/J move down and k/K move up."""
        dispatcher, _ = make_dispatcher()

        press(dispatcher, b"jJj")
        assert dispatcher.processes.selected_offset == 3

        press(dispatcher, b"kK")
        assert dispatcher.processes.selected_offset == 1

    @pytest.mark.parametrize("key", [b"t", b"T"])
    def test_terminate_sends_sigterm_to_current(self, key):
        """Test t sends SIGTERM to the selected pid without confirmation."""
        dispatcher, sender = make_dispatcher()
        press(dispatcher, b"jj")

        dispatcher.dispatch(key)

        assert sender.sent == [(102, signal.SIGTERM)]
        assert dispatcher.focus is Focus.PROCESS

    def test_terminate_with_no_processes_is_noop(self):
        """Test t does nothing when the list is empty."""
        dispatcher, sender = make_dispatcher(count=0)

        dispatcher.dispatch(b"t")

        assert sender.sent == []

    @pytest.mark.parametrize("key", [b"s", b"S"])
    def test_open_signal_menu(self, key):
        """Test s switches focus, resets the menu and captures the pid."""
        dispatcher, _ = make_dispatcher()
        press(dispatcher, b"j")

        dispatcher.dispatch(key)

        assert dispatcher.focus is Focus.SIGNAL
        assert dispatcher.target_pid == 101
        assert dispatcher.signals.scroll_offset == 0
        assert dispatcher.signals.selected_offset == 0


class TestSignalFocus:
    """Tests for key handling while the signal menu has focus."""

    def test_menu_resets_on_every_entry(self):
        """Test reopening the menu starts from the first signal again."""
        dispatcher, _ = make_dispatcher()
        press(dispatcher, b"s" + b"j" * 12)
        assert dispatcher.signals.scroll_offset > 0
        dispatcher.dispatch(b"\x1b")

        dispatcher.dispatch(b"s")

        assert dispatcher.signals.scroll_offset == 0
        assert dispatcher.signals.selected_offset == 0

    def test_escape_returns_to_process_focus_unchanged(self):
        """Test Esc leaves the process selection as it was before the menu."""
        dispatcher, sender = make_dispatcher()
        press(dispatcher, b"jjj")
        before = (dispatcher.processes.scroll_offset, dispatcher.processes.selected_offset)

        press(dispatcher, b"sjjk\x1b")

        assert dispatcher.focus is Focus.PROCESS
        assert (
            dispatcher.processes.scroll_offset,
            dispatcher.processes.selected_offset,
        ) == before
        assert sender.sent == []

    def test_navigation_moves_menu_not_list(self):
        """Test j/k in the menu leave the process list alone."""
        dispatcher, _ = make_dispatcher()
        press(dispatcher, b"sjJjK")

        assert dispatcher.signals.selected_offset == 2
        assert dispatcher.processes.selected_offset == 0

    def test_process_keys_do_nothing_in_menu(self):
        """Test h and t are not bound while choosing a signal."""
        dispatcher, sender = make_dispatcher()
        press(dispatcher, b"s")

        press(dispatcher, b"ht")

        assert dispatcher.show_help is True
        assert sender.sent == []
        assert dispatcher.focus is Focus.SIGNAL

    @pytest.mark.parametrize("enter", [b"\r", b"\n"])
    def test_enter_sends_selected_signal(self, enter):
        """Test Enter sends the selected signal and returns focus."""
        dispatcher, sender = make_dispatcher()
        press(dispatcher, b"jsj")

        dispatcher.dispatch(enter)

        assert sender.sent == [(101, SIGNAL_CATALOG[1].code)]
        assert dispatcher.focus is Focus.PROCESS

    def test_sigkill_scenario(self):
        """Test picking SIGKILL sends code 9 to the pid selected at s."""
        dispatcher, sender = make_dispatcher()
        press(dispatcher, b"jj")
        press(dispatcher, b"s")
        names = [entry.name for entry in SIGNAL_CATALOG]
        press(dispatcher, b"j" * names.index("SIGKILL"))
        assert dispatcher.signals.current().name == "SIGKILL"

        dispatcher.dispatch(b"\r")

        assert sender.sent == [(102, 9)]

    def test_signal_targets_pid_captured_at_keypress(self):
        """Test a rescan between s and Enter does not change the target."""
        dispatcher, sender = make_dispatcher()
        press(dispatcher, b"s")
        dispatcher.processes.replace([Process(pid=999, command_line="newcomer")])

        dispatcher.dispatch(b"\r")

        assert sender.sent == [(100, SIGNAL_CATALOG[0].code)]

    def test_enter_with_no_target_sends_nothing(self):
        """Test the menu opened on an empty list sends nothing."""
        dispatcher, sender = make_dispatcher(count=0)
        press(dispatcher, b"s\r")

        assert sender.sent == []
        assert dispatcher.focus is Focus.PROCESS


class TestReservedFocus:
    """Tests for the placeholder search and sort focuses."""

    @pytest.mark.parametrize("focus", [Focus.SEARCH, Focus.SORT])
    def test_all_keys_are_noops(self, focus):
        """Test reserved focuses ignore everything except quit."""
        dispatcher, sender = make_dispatcher()
        dispatcher.focus = focus

        press(dispatcher, b"hjkts\x1b\r")

        assert dispatcher.focus is focus
        assert dispatcher.show_help is True
        assert dispatcher.processes.selected_offset == 0
        assert sender.sent == []
        assert dispatcher.running is True
