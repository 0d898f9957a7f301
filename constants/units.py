"""
Unit Constants

Units that ship with a fresh database. The registry itself lives in the
`units` table and can be extended at runtime.
"""

# Seeded into the `units` table by init_db / the initial migration
DEFAULT_UNITS = ['g', 'kg', 'Stk', 'TL', 'EL', 'ml', 'l', 'Prise', 'Bund', 'Packung']

# Unit used for ad hoc shopping-list entries when none is given
DEFAULT_CUSTOM_UNIT = 'Stk'
