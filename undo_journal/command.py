#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Command base class for the undo journal
"""

from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Optional
import hashlib
import logging

from .errors import CommandDestroyed, IncompatibleCommand

logger = logging.getLogger(__name__)

HASH_BITS = 64


def _digest(*parts: bytes) -> int:
    hasher = hashlib.blake2b(digest_size=HASH_BITS // 8)
    for part in parts:
        hasher.update(part)
    return int.from_bytes(hasher.digest(), 'little')


@lru_cache(maxsize=None)
def variant_seed(cls: type) -> int:
    """
    Get the per-variant discriminant for a command class

    Derived from the module and qualified name of the class, so it is
    stable for the lifetime of the process (and across processes).

    Args:
        cls: Command subclass

    Returns:
        int: Unsigned 64-bit seed
    """
    return _digest(f"{cls.__module__}.{cls.__qualname__}".encode('utf-8'))


def destination_hash(seed: int, target: Any, key: Any = None) -> int:
    """
    Combine a variant seed with the identity of a target

    The target is identified by ``id(target)`` and the optional key (an
    attribute name, a mapping key, ...). Values written to the target never
    take part in the hash.

    Args:
        seed: Variant seed from variant_seed()
        target: Object the command writes into
        key: Optional location inside the target

    Returns:
        int: Unsigned 64-bit identity hash
    """
    return _digest(
        seed.to_bytes(HASH_BITS // 8, 'little'),
        id(target).to_bytes(HASH_BITS // 8, 'little'),
        repr(key).encode('utf-8'),
    )


class Command(ABC):
    """Abstract base class for all commands"""

    def __init__(self, message: str, type_destination_hash: int):
        """
        Initialize command

        Args:
            message: Human readable description
            type_destination_hash: 64-bit identity of variant + target
        """
        self.message = message
        self.type_destination_hash = type_destination_hash & ((1 << HASH_BITS) - 1)
        self.destroyed = False
        self.timestamp: Optional[float] = None

    @abstractmethod
    def do(self) -> None:
        """Apply the change to the target"""
        pass

    @abstractmethod
    def undo(self) -> None:
        """Restore the state captured when the command was created"""
        pass

    @abstractmethod
    def absorb(self, other: 'Command') -> None:
        """
        Take over the new state of a newer command on the same target

        Implementations must keep this command's original old state so
        that undo() still restores the baseline.

        Args:
            other: Newer command with the same identity hash
        """
        pass

    @abstractmethod
    def render_message(self) -> str:
        """
        Build the description from the current context

        Returns:
            str: Description of the command
        """
        pass

    def release(self) -> None:
        """Drop the owned context. Variants holding state override this."""
        pass

    @property
    def description(self) -> str:
        """Description of the command for UI/debugging"""
        return self.message

    def can_merge_with(self, other: 'Command') -> bool:
        """
        Check if this command can be merged with another

        Args:
            other: Another command

        Returns:
            bool: True if both are alive and target the same destination
        """
        if self.destroyed or other.destroyed:
            return False
        return self.type_destination_hash == other.type_destination_hash

    def merge(self, other: 'Command') -> None:
        """
        Merge a newer command on the same target into this one in place

        The caller owns ``other`` and is expected to destroy it afterwards.

        Args:
            other: Newer command with the same identity hash

        Raises:
            CommandDestroyed: If either command has been destroyed
            IncompatibleCommand: If the identity hashes differ
        """
        self._check_alive()
        other._check_alive()
        if self.type_destination_hash != other.type_destination_hash:
            raise IncompatibleCommand(
                f"Cannot merge '{other.description}' into '{self.description}'"
            )

        self.absorb(other)
        self.message = self.render_message()

    def destroy(self) -> None:
        """Release the message and the owned context"""
        if self.destroyed:
            logger.warning(f"Command destroyed twice: {self!r}")
            return

        self.release()
        self.message = None
        self.destroyed = True

    def _check_alive(self):
        if self.destroyed:
            raise CommandDestroyed(f"{self.__class__.__name__} has been destroyed")

    def __str__(self):
        """String representation"""
        return self.description or ""

    def __repr__(self):
        """Detailed representation"""
        return (f"{self.__class__.__name__}(description='{self.description}', "
                f"hash={self.type_destination_hash:#018x}, destroyed={self.destroyed})")
