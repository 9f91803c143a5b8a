#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
CompositeCommand for handling multiple commands as a single unit
"""

from typing import List
import logging

from ..command import Command, destination_hash, variant_seed

logger = logging.getLogger(__name__)


class CompositeCommand(Command):
    """Composite command that applies multiple commands as a single journal entry"""

    def __init__(self, commands: List[Command], description: str = None):
        """
        Initialize CompositeCommand

        Args:
            commands: Commands to apply, in order; ownership passes to the composite
            description: Optional description for the composite operation
        """
        self.commands = list(commands)
        self._label = description or "Composite operation"
        # Identity of the composite itself: composites never coalesce
        super().__init__(
            self.render_message(),
            destination_hash(variant_seed(type(self)), self),
        )

    def do(self) -> None:
        """
        Apply all commands in order

        If a command raises, the commands already applied are undone in
        reverse order before the original exception propagates. Errors
        raised while rolling back are logged and do not stop the rollback.
        """
        self._check_alive()
        applied = []

        try:
            for cmd in self.commands:
                cmd.do()
                applied.append(cmd)
        except Exception as e:
            logger.error(f"Error applying composite command: {e}")
            for applied_cmd in reversed(applied):
                try:
                    applied_cmd.undo()
                except Exception as rollback_error:
                    logger.error(f"Error during rollback: {rollback_error}")
            raise

    def undo(self) -> None:
        """Undo all commands in reverse order"""
        self._check_alive()
        for cmd in reversed(self.commands):
            cmd.undo()

    def can_merge_with(self, other: Command) -> bool:
        """Composite commands don't merge"""
        return False

    def absorb(self, other: Command) -> None:
        raise NotImplementedError("CompositeCommand does not support merging")

    def render_message(self) -> str:
        return f"{self._label} ({len(self.commands)} commands)"

    def release(self) -> None:
        for cmd in self.commands:
            cmd.destroy()
        self.commands = []

    def __len__(self):
        """Get number of commands"""
        return len(self.commands)
