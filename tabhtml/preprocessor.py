import logging
from typing import List

logger = logging.getLogger(__name__)

INDENTED_WITH_SPACES = 'spaces'
INDENTED_WITH_TABS = 'tab'
INDENT_UNIT = '\t'


class PreProcessor:
    """
    Cleans up raw tabhtml source before compilation.

    Blank lines are dropped and space indentation is rewritten to one tab per
    level, so the compiler only ever has to count leading tabs.
    """

    def __init__(self, source: str):
        self.lines: List[str] = source.split('\n')
        self.indent_type: str = ''
        self.indent_size: int = 0

    def process(self) -> str:
        """Returns the canonical, tab-indented form of the source."""
        self._remove_empty_lines()
        self.indent_type = self._get_indent_type()
        if self.indent_type == INDENTED_WITH_SPACES:
            self.indent_size = self._get_spaces_per_tab()
            self._replace_spaces_with_tabs(self.indent_size)
        logger.debug("Detected indentation: %s (width %d)", self.indent_type, self.indent_size)
        return '\n'.join(self.lines)

    def _remove_empty_lines(self):
        self.lines = [line for line in self.lines if line.strip()]

    def _get_indent_type(self) -> str:
        # The first indented line decides for the whole document
        for line in self.lines:
            if line[0] == ' ':
                return INDENTED_WITH_SPACES
            if line[0] == INDENT_UNIT:
                return INDENTED_WITH_TABS
        return INDENTED_WITH_TABS

    def _get_spaces_per_tab(self) -> int:
        for line in self.lines:
            if line[0] == ' ':
                return len(line) - len(line.lstrip(' '))
        return 0

    def _replace_spaces_with_tabs(self, spaces_per_tab: int):
        if spaces_per_tab <= 0:
            return
        for i, line in enumerate(self.lines):
            stripped = line.lstrip(' ')
            leading = len(line) - len(stripped)
            if leading:
                self.lines[i] = INDENT_UNIT * (leading // spaces_per_tab) + stripped


def normalize(source: str) -> str:
    """Strips blank lines and converts space indentation to tabs."""
    return PreProcessor(source).process()
