import bisect
import logging

from errors import UnknownLine

log = logging.getLogger(__name__)


class _Entry:
    __slots__ = ('number', 'text', 'statement', 'next')

    def __init__(self, number, text, statement=None):
        self.number = number
        self.text = text
        self.statement = statement
        self.next = None


class Program:
    """
    The stored program: line number -> (source text, parsed statement).

    Entries form a singly linked chain in ascending line order, so walking
    the program costs one hop per line. A sorted index of the live line
    numbers is kept alongside, used only to find an entry's neighbours
    when lines are inserted or removed.
    """

    def __init__(self):
        self._entries = {}
        self._numbers = []
        self._first = None

    def __len__(self):
        return len(self._entries)

    def __contains__(self, number):
        return number in self._entries

    def __iter__(self):
        entry = self._first
        while entry is not None:
            yield entry.number
            entry = entry.next

    def _predecessor(self, number):
        """Entry with the largest line number below `number`, or None."""
        idx = bisect.bisect_left(self._numbers, number)
        if idx == 0:
            return None
        return self._entries[self._numbers[idx - 1]]

    def add_line(self, number, text, statement=None):
        """
        Stores `text` under `number`, replacing any line already there.
        A replaced line loses its old statement; pass the freshly parsed
        one here or attach it with set_statement().
        """
        if not isinstance(number, int) or isinstance(number, bool) or number <= 0:
            raise ValueError(f"Line numbers must be positive integers, got {number!r}")

        existing = self._entries.get(number)
        if existing is not None:
            existing.text = text
            existing.statement = statement
            log.debug("replaced line %d", number)
            return

        entry = _Entry(number, text, statement)
        prev = self._predecessor(number)
        if prev is None:
            entry.next = self._first
            self._first = entry
        else:
            entry.next = prev.next
            prev.next = entry
        self._entries[number] = entry
        bisect.insort(self._numbers, number)
        log.debug("added line %d", number)

    def set_statement(self, number, statement):
        entry = self._entries.get(number)
        if entry is None:
            raise UnknownLine(number)
        entry.statement = statement

    def remove_line(self, number):
        entry = self._entries.get(number)
        if entry is None:
            return
        if entry is self._first:
            self._first = entry.next
        else:
            prev = self._predecessor(number)
            if prev is None or prev.next is not entry:
                # order index and chain disagree; leave the program as it is
                log.warning("line %d has no linked predecessor, not removed", number)
                return
            prev.next = entry.next
        del self._entries[number]
        del self._numbers[bisect.bisect_left(self._numbers, number)]
        entry.next = None
        entry.statement = None
        log.debug("removed line %d", number)

    def clear(self):
        self._entries.clear()
        self._numbers.clear()
        self._first = None

    def get_first(self):
        if self._first is None:
            return None
        return self._first.number

    def get_next(self, number):
        """
        Line number after `number`, or None at the end of the program.
        `number` need not be stored: the answer is then the first stored
        line above it.
        """
        entry = self._entries.get(number)
        if entry is None:
            entry = self._predecessor(number)
            if entry is None:
                return self.get_first()
        if entry.next is None:
            return None
        return entry.next.number

    def get_text(self, number):
        entry = self._entries.get(number)
        if entry is None:
            return ""
        return entry.text

    def get_statement(self, number):
        entry = self._entries.get(number)
        if entry is None or entry.statement is None:
            raise UnknownLine(number)
        return entry.statement

    def lines(self, start=None, end=None):
        """(number, text) pairs in order, optionally limited to start..end."""
        number = self.get_first() if start is None else start
        if number is not None and number not in self._entries:
            number = self.get_next(number)
        while number is not None and (end is None or number <= end):
            yield number, self._entries[number].text
            number = self.get_next(number)
