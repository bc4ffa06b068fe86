"""Server version model, snapshot catalog and upgrade advisory."""
