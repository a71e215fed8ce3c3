"""
Interfaces the engine calls back into: prompts, progress and cancellation.
"""


class UserPrompt:
    """Synchronous dialogs. Every call blocks until the user answers."""

    def confirm(self, title, message):
        """Return True for Yes."""
        raise NotImplementedError

    def overwrite(self, filename):
        """Return an :class:`OverwriteChoice`."""
        raise NotImplementedError

    def input_text(self, title, prompt, max_len, initial=''):
        """Return the entered text, or None when the dialog was cancelled."""
        raise NotImplementedError

    def alert(self, title, message):
        """Show an error and wait for acknowledgment."""
        raise NotImplementedError


class ProgressSink:
    def show(self, label, entry_name, current, total):
        pass

    def hide(self):
        pass


class CancelSignal:
    """Polled at cancellation checkpoints; never interrupts I/O in flight."""

    def requested(self):
        return False


class CancelFlag(CancelSignal):
    """Cancel signal set explicitly, e.g. from a key or signal handler."""

    def __init__(self):
        self._requested = False

    def request(self):
        self._requested = True

    def reset(self):
        self._requested = False

    def requested(self):
        return self._requested

