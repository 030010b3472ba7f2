"""minidream CLI — command-line interface."""
