"""Core subsystems: settings, placeholder substitution, message catalog."""
