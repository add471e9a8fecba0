"""End-to-end shared file retrieval job."""
