"""Generation services: submit, poll, download, commit."""
