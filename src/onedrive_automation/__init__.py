"""Unattended OneDrive/SharePoint file retrieval over Microsoft Graph."""

__version__ = "0.1.0"
