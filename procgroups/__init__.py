"""Process, thread, process group and session bookkeeping."""

__version__ = "0.1.0"