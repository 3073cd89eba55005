"""Network channel emulator with Go-Back-N and Selective Repeat protocols."""

__version__ = "1.0.0"