"""Unit tests for the shutdown coordinator."""

import signal
import threading

from url_snapshot.shutdown import ShutdownCoordinator


class TestShutdownCoordinator:
    def test_starts_running(self) -> None:
        assert ShutdownCoordinator().requested is False

    def test_first_request_transitions(self) -> None:
        coordinator = ShutdownCoordinator()
        assert coordinator.request("SIGINT") is True
        assert coordinator.requested is True
        assert coordinator.reason == "SIGINT"

    def test_later_requests_are_noops(self) -> None:
        coordinator = ShutdownCoordinator()
        coordinator.request("SIGINT")
        assert coordinator.request("SIGTERM") is False
        assert coordinator.reason == "SIGINT"
        assert coordinator.requested is True

    def test_signal_handler_requests_shutdown(self) -> None:
        coordinator = ShutdownCoordinator()
        coordinator._handle_signal(signal.SIGTERM, None)
        assert coordinator.requested is True
        assert coordinator.reason == "SIGTERM"

    def test_install_and_restore_handlers(self) -> None:
        before = signal.getsignal(signal.SIGTERM)
        with ShutdownCoordinator() as coordinator:
            assert signal.getsignal(signal.SIGTERM) == coordinator._handle_signal
            assert signal.getsignal(signal.SIGINT) == coordinator._handle_signal
        assert signal.getsignal(signal.SIGTERM) == before

    def test_delivered_signal_sets_flag(self) -> None:
        with ShutdownCoordinator() as coordinator:
            signal.raise_signal(signal.SIGTERM)
            assert coordinator.requested is True

    def test_signal_during_request_does_not_block(self) -> None:
        with ShutdownCoordinator() as coordinator:
            nested = []

            class ReentrantEvent(threading.Event):
                def set(self) -> None:
                    super().set()
                    if not nested:
                        nested.append(True)
                        # The handler runs on this thread before raise_signal returns.
                        signal.raise_signal(signal.SIGTERM)

            coordinator._event = ReentrantEvent()
            assert coordinator.request("SIGINT") is True

        assert nested == [True]
        assert coordinator.requested is True
        assert coordinator.reason == "SIGINT"
