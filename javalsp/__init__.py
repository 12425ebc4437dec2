"""Java Language Server installer.

Resolves, downloads and launches the Eclipse JDT language server together with
the Java runtime it needs, so a host application can start it without any
manual installation step.
"""

__version__ = "0.1.0"
