"""verigate - email/password authentication with verified accounts and bearer sessions."""

__version__ = "0.1.0"
