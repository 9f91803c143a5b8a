#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Command implementations for the undo journal
"""

from .composite_command import CompositeCommand
from .set_value_commands import SetAttributeCommand, SetItemCommand

__all__ = [
    'CompositeCommand',
    'SetAttributeCommand',
    'SetItemCommand'
]
