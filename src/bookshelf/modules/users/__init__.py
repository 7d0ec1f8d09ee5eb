"""Users module - authenticated actors."""
