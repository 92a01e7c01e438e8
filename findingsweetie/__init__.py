"""Finding Sweetie lost-and-found pet registry."""
