#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Value-setting commands for the undo journal
"""

from abc import abstractmethod
from typing import Any, Optional
import logging

from ..command import Command, destination_hash, variant_seed

logger = logging.getLogger(__name__)


class _SetValueCommand(Command):
    """Shared implementation for commands that overwrite one stored value"""

    kind = "value"

    def __init__(self, target: Any, key: Any, new_value: Any, name: Optional[str] = None):
        """
        Initialize the command, capturing the current value as the old value

        Args:
            target: Object holding the value
            key: Location of the value inside the target
            new_value: Value written by do()
            name: Optional display name of the value
        """
        self.target = target
        self.key = key
        self.old_value = self.read()
        self.new_value = new_value
        self.name = name
        super().__init__(
            self.render_message(),
            destination_hash(variant_seed(type(self)), target, key),
        )

    @abstractmethod
    def read(self) -> Any:
        """Read the current value from the target"""
        pass

    @abstractmethod
    def write(self, value: Any) -> None:
        """Store a value into the target"""
        pass

    def do(self) -> None:
        """Write the new value into the target"""
        self._check_alive()
        self.write(self.new_value)

    def undo(self) -> None:
        """Write the old value back into the target"""
        self._check_alive()
        self.write(self.old_value)

    def absorb(self, other: '_SetValueCommand') -> None:
        # Keep original old value, take the final new value
        self.new_value = other.new_value

    def render_message(self) -> str:
        label = self.name if self.name is not None else self.key
        return (f"[CMD: {self.__class__.__name__}] Set the {self.kind} "
                f"\"{label}\" of {type(self.target).__name__} "
                f"from {self.old_value!r} to {self.new_value!r}")

    def release(self) -> None:
        self.target = None
        self.old_value = None
        self.new_value = None


class SetAttributeCommand(_SetValueCommand):
    """Command to set an attribute of an object"""

    kind = "attribute"

    def read(self) -> Any:
        return getattr(self.target, self.key)

    def write(self, value: Any) -> None:
        setattr(self.target, self.key, value)


class SetItemCommand(_SetValueCommand):
    """Command to set an item of a mapping or sequence"""

    kind = "item"

    def read(self) -> Any:
        return self.target[self.key]

    def write(self, value: Any) -> None:
        self.target[self.key] = value
