"""boilersync — pull designated files from remote repositories into a local tree."""

__version__ = "0.1.0"
