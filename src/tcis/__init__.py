"""Trading Card Inventory System."""
