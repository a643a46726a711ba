"""Project model and loader for multi-package (workspace) projects."""
