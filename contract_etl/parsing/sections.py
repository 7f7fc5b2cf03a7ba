"""
Section Splitter
================
Single-pass state machine that cuts a contract file into tagged sections.

Grammar:
    {TAG}
    <body line>
    ...
    {/TAG}

The feed is third-party and loosely formed, so the splitter is lenient:
- the closing tag is not required to match the opening tag
- a new start marker implicitly closes the open section
- end of file implicitly closes the open section

Only the body of the currently open section is buffered.
"""

import re
from typing import Iterable, Iterator, List, Optional

from .records import SectionBlock

SECTION_START_PATTERN = re.compile(r'\{([A-Z]+)\}')
SECTION_END_PATTERN = re.compile(r'\{/([A-Z]+)\}')

IDLE = 'IDLE'
IN_SECTION = 'IN_SECTION'


class SectionSplitter:
    """
    Two-state (IDLE / IN_SECTION) line classifier.

    Feed lines one at a time; whenever a section body is complete a
    SectionBlock is returned. Call finish() at end of input to flush a
    section left open by a truncated file.
    """

    def __init__(self):
        self.state = IDLE
        self.current_tag: Optional[str] = None
        self._buffer: List[str] = []

    def feed(self, line: str) -> Optional[SectionBlock]:
        """
        Consume one line

        Args:
            line: Raw line, with or without its line terminator

        Returns:
            The flushed section if this line closed one, else None
        """
        line = line.rstrip('\r\n')

        start = SECTION_START_PATTERN.fullmatch(line)
        if start:
            flushed = self._flush() if self.state == IN_SECTION else None
            self.state = IN_SECTION
            self.current_tag = start.group(1)
            return flushed

        if self.state == IDLE:
            return None

        if SECTION_END_PATTERN.fullmatch(line):
            flushed = self._flush()
            self.state = IDLE
            self.current_tag = None
            return flushed

        stripped = line.strip()
        if stripped:
            self._buffer.append(stripped)
        return None

    def finish(self) -> Optional[SectionBlock]:
        """Flush a section still open at end of input"""
        flushed = self._flush() if self.state == IN_SECTION else None
        self.state = IDLE
        self.current_tag = None
        return flushed

    def _flush(self) -> Optional[SectionBlock]:
        if not self._buffer:
            return None
        block = SectionBlock(tag=self.current_tag, lines=self._buffer)
        self._buffer = []
        return block


def iter_sections(lines: Iterable[str]) -> Iterator[SectionBlock]:
    """
    Stream SectionBlocks out of an iterable of lines (e.g. an open file)

    Args:
        lines: Line iterable; consumed lazily

    Yields:
        SectionBlock for every non-empty section, in file order
    """
    splitter = SectionSplitter()
    for line in lines:
        block = splitter.feed(line)
        if block is not None:
            yield block

    block = splitter.finish()
    if block is not None:
        yield block
