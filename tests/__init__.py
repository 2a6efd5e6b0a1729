# -*- coding: utf-8 -*-
"""
Test suite for the Trading Card Inventory System.

Test Structure:
- tests/domain/ - Enum and card validation tests
- tests/db/ - Database setup and model rule tests
- tests/services/ - Collection, binder, deck, ledger and audit tests
- tests/cli/ - `tcis` command line tests
- tests/ui/ - TUI command runner and app tests
"""
