"""Exceptions raised by the commit grammar.

Only two things can go wrong: the grammar itself is unusable, or the text
handed to the parser has nothing in it. Text that simply does not match a
pattern is never an error — the affected fields are left as None.
"""

from __future__ import annotations


class CommitLensError(Exception):
    """Base class for every error raised by commitlens_core."""


class ConfigurationError(CommitLensError, ValueError):
    """Grammar options are missing, empty or cannot be compiled.

    A setup defect, not a data defect: the streaming adapters never turn it
    into a warning.
    """


class InputError(CommitLensError, ValueError):
    """A raw commit message is empty or whitespace-only."""
