"""Words of actions paired with timed conditions."""
# Copyright 2026 by California Institute of Technology
# All rights reserved. Licensed under 3-clause BSD.
#
import collections

from tazone.symbolic.timed_condition import TimedCondition


TimedWord = collections.namedtuple('TimedWord', ['word', 'durations'])
TimedWord.__doc__ = """Actions interleaved with delays.

The delay `durations[i]` elapses before `word[i]`,
and `durations[-1]` after the last action.
"""


class ElementaryLanguage(object):
    """Set of timed words with the same actions.

    The delays range over `timed_condition`,
    which has one delay more than `word` has actions.
    """

    def __init__(self, word, timed_condition):
        self.word = tuple(word)
        self.timed_condition = timed_condition
        n = timed_condition.size()
        assert len(self.word) + 1 == n, (self.word, n)

    @classmethod
    def empty(cls):
        """Return language that contains only the empty word."""
        return cls(tuple(), TimedCondition.empty())

    def concatenate(self, other):
        word = self.word + other.word
        condition = self.timed_condition + other.timed_condition
        return type(self)(word, condition)

    __add__ = concatenate

    def successor(self, action):
        """Return language after reading `action` immediately."""
        word = self.word + (action,)
        return type(self)(word, self.timed_condition.extend_zero())

    def time_successor(self):
        condition = self.timed_condition.time_successor()
        return type(self)(self.word, condition)

    def is_simple(self):
        return self.timed_condition.is_simple()

    def enumerate(self):
        """Return `list` of simple languages contained in `self`."""
        return [
            type(self)(self.word, c)
            for c in self.timed_condition.enumerate()]

    def sample(self):
        """Return a `TimedWord` in `self`."""
        values = self.timed_condition.sample()
        durations = TimedCondition.to_durations(values)
        return TimedWord(self.word, tuple(durations))

    def __eq__(self, other):
        if not isinstance(other, ElementaryLanguage):
            return NotImplemented
        return (
            self.word == other.word and
            self.timed_condition == other.timed_condition)

    def __hash__(self):
        return hash((self.word, self.timed_condition))

    def __str__(self):
        return '({w}, {c})'.format(
            w=''.join(map(str, self.word)),
            c=self.timed_condition)
