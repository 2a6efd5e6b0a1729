# -*- coding: utf-8 -*-

"""Trading Card Inventory System - card collection, binders, decks and sales."""

__version__ = "0.1.0"
