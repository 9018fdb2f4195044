"""Mailweaver: turn decorated page content and stylesheets into MJML email documents."""

__version__ = "0.1.0"
