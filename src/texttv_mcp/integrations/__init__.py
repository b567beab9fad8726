"""Protocol integrations for the Text TV page store."""
