"""Session controller and drag-and-drop coordinator (Qt signals, no widgets)."""
