"""Nelson–Siegel–Svensson spot / forward curve lab."""

__version__ = "0.1.0"
