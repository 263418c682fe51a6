"""Built-in CLI commands for toolspec.

* :mod:`~toolspec.commands.inspect` -- list tools, show one tool's
  documentation, print API info, and list the registered spec formats.

Each command is a plain callback function registered directly on the root
app in :mod:`toolspec.app`.
"""
