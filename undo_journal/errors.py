#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Exceptions raised by the journal and its commands
"""


class JournalError(Exception):
    """Base class for all journal errors"""


class AllocationFailure(JournalError, MemoryError):
    """Backing storage for the journal could not be reserved or grown"""


class JournalDisposed(JournalError):
    """Operation attempted on a journal that has already been disposed"""


class CommandDestroyed(JournalError):
    """Operation attempted on a command that has already been destroyed"""


class IncompatibleCommand(JournalError, ValueError):
    """Two commands with different identity hashes cannot be merged"""
