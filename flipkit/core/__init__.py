"""Core subsystems for flipkit."""
