"""
Line-mode collaborators: prompts on stdin/stdout, progress lines, Ctrl+C cancel.
"""
import logging
import signal
import sys

from .core.actions import OverwriteChoice
from .engine.collaborators import CancelFlag, ProgressSink, UserPrompt

LOGGER = logging.getLogger(__name__)

_OVERWRITE_KEYS = {
    'y': OverwriteChoice.YES,
    'yes': OverwriteChoice.YES,
    'n': OverwriteChoice.NO,
    'no': OverwriteChoice.NO,
    'a': OverwriteChoice.ALL,
    'all': OverwriteChoice.ALL,
    'c': OverwriteChoice.CANCEL,
    'cancel': OverwriteChoice.CANCEL,
}


class ConsolePrompt(UserPrompt):
    """Ask questions on a text stream.

    With ``assume_yes`` every confirmation is answered Yes and the overwrite
    prompt answers ``overwrite`` without reading input.
    """

    def __init__(self, input_func=None, output=None, assume_yes=False, overwrite=OverwriteChoice.NO):
        self._input = input_func or input
        self._output = output or sys.stdout
        self.assume_yes = assume_yes
        self.default_overwrite = OverwriteChoice(overwrite)

    def _say(self, text):
        print(text, file=self._output)

    def _ask(self, question):
        try:
            return self._input(question).strip()
        except EOFError:
            return ''

    def confirm(self, title, message):
        if self.assume_yes:
            return True
        return self._ask(f'{message} (y/N) ').lower() in ('y', 'yes')

    def overwrite(self, filename):
        if self.assume_yes:
            return self.default_overwrite
        while True:
            answer = self._ask(f'{filename} exists. Overwrite? (Y)es/(N)o/(A)ll/(C)ancel ').lower()
            if not answer:
                return OverwriteChoice.CANCEL
            choice = _OVERWRITE_KEYS.get(answer)
            if choice is not None:
                return choice

    def input_text(self, title, prompt, max_len, initial=''):
        suffix = f' [{initial}]' if initial else ''
        answer = self._ask(f'{prompt}{suffix} ')
        if not answer:
            return None
        return answer[:max_len]

    def alert(self, title, message):
        self._say(f'{title}: {message}')


class ConsoleProgress(ProgressSink):
    """One status line per progress report."""

    def __init__(self, output=None, enabled=True):
        self._output = output or sys.stderr
        self.enabled = enabled
        self._visible = False

    def show(self, label, entry_name, current, total):
        if not self.enabled:
            return
        print(f'{label} {entry_name} ({current}/{total})', file=self._output)
        self._visible = True

    def hide(self):
        if self._visible:
            self._output.flush()
        self._visible = False


def install_interrupt_handler(flag: CancelFlag):
    """Route SIGINT into ``flag``; a second Ctrl+C interrupts for real.

    Returns the previous handler so callers can restore it.
    """

    def _handler(signum, frame):
        if flag.requested():
            raise KeyboardInterrupt
        LOGGER.debug('Cancel requested from keyboard')
        flag.request()

    return signal.signal(signal.SIGINT, _handler)
