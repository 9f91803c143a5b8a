#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Undo/Redo journal
"""

from .command import Command, destination_hash, variant_seed
from .errors import (
    AllocationFailure,
    CommandDestroyed,
    IncompatibleCommand,
    JournalDisposed,
    JournalError
)
from .journal import DEFAULT_MAX_DEPTH, DEFAULT_UPDATE_WINDOW_MS, Journal

__all__ = [
    'Command',
    'Journal',
    'DEFAULT_MAX_DEPTH',
    'DEFAULT_UPDATE_WINDOW_MS',
    'destination_hash',
    'variant_seed',
    'JournalError',
    'AllocationFailure',
    'CommandDestroyed',
    'IncompatibleCommand',
    'JournalDisposed'
]
