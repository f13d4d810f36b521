"""Online exam platform: REST API and exam-session client."""

__version__ = "1.0.0"
