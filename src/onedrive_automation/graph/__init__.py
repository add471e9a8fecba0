"""Microsoft Graph client, drive models and shared-item lookup."""
